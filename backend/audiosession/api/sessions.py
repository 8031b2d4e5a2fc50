"""
Audio session API endpoints - session metadata, chunk upload and
missing-chunk reconciliation.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ..config import settings
from ..core.errors import NotFoundError, PayloadTooLargeError
from ..core.paths import derive_chunk_path, derive_session_paths, require_id
from ..core.reconciler import ChunkReconciler
from ..core.session_store import SessionMetadataStore
from ..core.status_store import ProcessingStatusStore
from ..models import MetadataFields, ProcessingStatusUpdate, SessionOptions
from ..models.base import UpdateModel
from ..storage import BlobStore, get_blob_store
from ..utils.auth import Claims, get_current_claims
from ..utils.clock import utc_now
from .deps import get_reconciler, get_session_store, get_status_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audio", tags=["audio"])

DEFAULT_CHUNK_CONTENT_TYPE = "audio/webm"


class UpdateMetadataRequest(UpdateModel):
    session_id: str
    metadata: MetadataFields


async def read_limited_body(request: Request, max_bytes: int) -> bytes:
    """
    Read the request body, giving up as soon as it exceeds max_bytes.

    Raises:
        PayloadTooLargeError: If the declared or actual size exceeds max_bytes
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise PayloadTooLargeError(f"Chunk exceeds the {max_bytes} byte limit")

    body = bytearray()
    async for part in request.stream():
        body.extend(part)
        if len(body) > max_bytes:
            raise PayloadTooLargeError(f"Chunk exceeds the {max_bytes} byte limit")
    return bytes(body)


@router.post("/sessions/{session_id}", status_code=status.HTTP_201_CREATED)
async def create_session(
    session_id: str,
    options: Optional[SessionOptions] = None,
    claims: Claims = Depends(get_current_claims),
    sessions: SessionMetadataStore = Depends(get_session_store)
):
    """
    Initialize a session, replacing any documents already stored for it.

    Returns:
        The new session and processing status documents
    """
    initialized = await sessions.create(claims.user_id, session_id, options, user_email=claims.email)
    return {
        "message": "Session initialized successfully",
        "session": initialized.session.to_document(),
        "processingStatus": initialized.processing_status.to_document(),
    }


@router.put("/sessions/metadata")
async def update_session_metadata(
    request: UpdateMetadataRequest,
    claims: Claims = Depends(get_current_claims),
    sessions: SessionMetadataStore = Depends(get_session_store)
):
    """
    Create or update session metadata.

    An unknown session is created with the supplied fields as options.
    """
    session_id = require_id(request.session_id, 'session id')
    logger.info("User %s (%s) updating session metadata", claims.email, claims.user_id)

    result = await sessions.upsert(claims.user_id, session_id, request.metadata, user_email=claims.email)
    return {
        "message": "Session metadata updated successfully",
        "sessionId": session_id,
        "sessionKey": derive_session_paths(claims.user_id, session_id).session_file,
        "created": result.created,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/sessions")
async def list_sessions(
    claims: Claims = Depends(get_current_claims),
    sessions: SessionMetadataStore = Depends(get_session_store)
):
    """List the caller's sessions, newest first."""
    summaries = await sessions.list_sessions(claims.user_id)
    return {
        "message": "Sessions listed successfully",
        "user": claims.email,
        "userId": claims.user_id,
        "sessions": [summary.to_document() for summary in summaries],
        "count": len(summaries),
        "timestamp": utc_now().isoformat(),
    }


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    claims: Claims = Depends(get_current_claims),
    sessions: SessionMetadataStore = Depends(get_session_store)
):
    """Load a session and report which storage layout served it."""
    lookup = await sessions.resolve(claims.user_id, session_id)
    if not lookup.found:
        raise NotFoundError(f"Session metadata not found for {session_id}")
    return {
        "source": lookup.source.value,
        "key": lookup.key,
        "session": lookup.session.to_document(),
    }


@router.put("/sessions/{session_id}/chunks/{chunk_number}", status_code=status.HTTP_201_CREATED)
async def upload_chunk(
    session_id: str,
    chunk_number: int,
    request: Request,
    duration: Optional[int] = Query(default=None, description="Chunk duration in seconds"),
    claims: Claims = Depends(get_current_claims),
    store: BlobStore = Depends(get_blob_store),
    sessions: SessionMetadataStore = Depends(get_session_store),
    statuses: ProcessingStatusStore = Depends(get_status_store)
):
    """
    Store one audio chunk at the key derived from its ordinal.

    Without an explicit duration the session's chunk duration is used, or
    the configured default when the session is unknown.
    Bodies larger than the configured chunk size limit are rejected with 413.
    """
    if duration is None:
        lookup = await sessions.resolve(claims.user_id, session_id)
        duration = lookup.session.audio.chunk_duration if lookup.found else sessions.default_chunk_duration

    key = derive_chunk_path(claims.user_id, session_id, chunk_number, duration)
    body = await read_limited_body(request, settings.max_chunk_size_bytes)
    content_type = request.headers.get("content-type") or DEFAULT_CHUNK_CONTENT_TYPE

    await store.put_object(key, body, content_type)
    await statuses.record_chunk_upload(claims.user_id, session_id)

    logger.info(
        "Stored chunk %d of session %s (%d bytes)", chunk_number, session_id, len(body),
        extra={'user_id': claims.user_id, 'session_id': session_id, 'chunk_number': chunk_number}
    )
    return {
        "message": "Chunk stored successfully",
        "key": key,
        "sessionId": require_id(session_id, 'session id'),
        "chunkNumber": chunk_number,
        "sizeBytes": len(body),
        "timestamp": utc_now().isoformat(),
    }


@router.get("/sessions/{session_id}/missing-chunks")
async def get_missing_chunks(
    session_id: str,
    claims: Claims = Depends(get_current_claims),
    reconciler: ChunkReconciler = Depends(get_reconciler)
):
    """
    Compare uploaded chunks with the session's chunk count.

    When the session metadata is missing or unreadable the uploaded list is still returned,
    with the expected count marked unknown.
    """
    report = await reconciler.reconcile(claims.user_id, session_id)
    return {**report.to_document(), "timestamp": utc_now().isoformat()}


@router.get("/sessions/{session_id}/status")
async def get_processing_status(
    session_id: str,
    claims: Claims = Depends(get_current_claims),
    statuses: ProcessingStatusStore = Depends(get_status_store)
):
    processing_status = await statuses.load_or_default(claims.user_id, session_id)
    return processing_status.to_document()


@router.patch("/sessions/{session_id}/status")
async def update_processing_status(
    session_id: str,
    updates: ProcessingStatusUpdate,
    claims: Claims = Depends(get_current_claims),
    statuses: ProcessingStatusStore = Depends(get_status_store)
):
    processing_status = await statuses.update(claims.user_id, session_id, updates)
    return processing_status.to_document()
