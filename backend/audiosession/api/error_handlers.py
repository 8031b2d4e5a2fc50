"""
Exception handlers mapping session store errors to JSON responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.errors import AudioSessionError, InvalidArgumentError, NotFoundError, PayloadTooLargeError, StoreError
from ..utils.clock import utc_now

logger = logging.getLogger(__name__)


def create_json_error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "type": error_type, "timestamp": utc_now().isoformat()},
    )


async def audio_session_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle all AudioSessionError subclasses with appropriate status codes."""
    if isinstance(exc, InvalidArgumentError):
        return create_json_error_response(400, str(exc), "invalid_argument")
    if isinstance(exc, NotFoundError):
        return create_json_error_response(404, str(exc), "not_found")
    if isinstance(exc, PayloadTooLargeError):
        return create_json_error_response(413, str(exc), "payload_too_large")
    if isinstance(exc, StoreError):
        logger.error("Blob store failure: %s", exc)
        return create_json_error_response(500, str(exc), "store_error")

    logger.exception("Unexpected session error: %s", exc)
    return create_json_error_response(500, str(exc), "internal_error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AudioSessionError, audio_session_error_handler)
