"""
Processing Status Store - the denormalized processing/status.json document.
"""

import logging
from typing import Optional

from ..models import ProcessingStatus, ProcessingStatusUpdate, UploadProgressUpdate
from ..storage.interface import BlobStore
from ..utils.clock import Clock, utc_now
from .documents import read_document, write_document
from .errors import InconsistentStateError, MalformedDocumentError, NotFoundError
from .merge import merge_model
from .paths import derive_session_paths, require_id

logger = logging.getLogger(__name__)


class ProcessingStatusStore:
    """
    Reads and merges processing status documents.
    The document is created lazily and never required to exist.
    """

    def __init__(self, store: BlobStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def _read(self, key: str) -> ProcessingStatus:
        try:
            return await read_document(self.store, key, ProcessingStatus)
        except NotFoundError as e:
            raise InconsistentStateError(f"No processing status at {key}") from e
        except MalformedDocumentError as e:
            raise InconsistentStateError(str(e)) from e

    async def load_or_default(self, user_id: str, session_id: str) -> ProcessingStatus:
        """
        Load the processing status, synthesizing zeroed counters when the
        document is missing or unreadable.

        Raises:
            StoreError: If the blob store itself fails
        """
        paths = derive_session_paths(user_id, session_id)
        try:
            return await self._read(paths.processing_status)
        except InconsistentStateError as e:
            logger.warning(
                "Using default processing status: %s", e,
                extra={'user_id': user_id, 'session_id': session_id}
            )
            return ProcessingStatus(session_id=require_id(session_id, 'session id'), timestamp=self.clock())

    async def update(
        self,
        user_id: str,
        session_id: str,
        updates: ProcessingStatusUpdate,
        existing: Optional[ProcessingStatus] = None
    ) -> ProcessingStatus:
        """
        Merge a partial update into the processing status and rewrite it.

        Same precedence as session updates: empty values keep the old value.
        The timestamp is stamped to now.
        """
        paths = derive_session_paths(user_id, session_id)
        if existing is None:
            existing = await self.load_or_default(user_id, session_id)

        merged = merge_model(existing, updates)
        merged = merged.model_copy(update={'timestamp': self.clock()})

        await write_document(self.store, paths.processing_status, merged)
        return merged

    async def record_chunk_upload(self, user_id: str, session_id: str) -> ProcessingStatus:
        """Count one more uploaded chunk and stamp the upload time."""
        current = await self.load_or_default(user_id, session_id)
        return await self.update(user_id, session_id, ProcessingStatusUpdate(
            audio=UploadProgressUpdate(
                chunks_uploaded=current.audio.chunks_uploaded + 1,
                last_chunk_at=self.clock(),
            )
        ), existing=current)
