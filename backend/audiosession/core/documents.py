"""
JSON document I/O on top of a blob store.
"""

import json
import logging
from typing import Type, TypeVar

from pydantic import ValidationError

from ..models.base import DocumentModel
from ..storage.interface import BlobStore
from .errors import MalformedDocumentError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = 'application/json'

D = TypeVar('D', bound=DocumentModel)


async def read_document(store: BlobStore, key: str, model: Type[D]) -> D:
    """
    Load and validate the JSON document at key.

    Raises:
        NotFoundError: If nothing is stored at key
        MalformedDocumentError: If the stored bytes are not a valid document
    """
    body = await store.get_object(key)
    try:
        return model.model_validate(json.loads(body.decode('utf-8')))
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise MalformedDocumentError(f"Malformed document at {key}: {e}") from e


async def write_document(store: BlobStore, key: str, document: DocumentModel) -> None:
    """Serialize document as indented UTF-8 JSON and write it at key."""
    body = json.dumps(document.to_document(), indent=2, ensure_ascii=False).encode('utf-8')
    await store.put_object(key, body, JSON_CONTENT_TYPE)
    logger.debug("Wrote %s", key, extra={'key': key})
