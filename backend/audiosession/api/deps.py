"""
Dependencies shared by the API routers.
"""

from fastapi import Depends

from ..config import settings
from ..core.reconciler import ChunkReconciler
from ..core.session_store import SessionMetadataStore
from ..core.status_store import ProcessingStatusStore
from ..storage import BlobStore, get_blob_store


def get_session_store(store: BlobStore = Depends(get_blob_store)) -> SessionMetadataStore:
    return SessionMetadataStore(
        store,
        default_chunk_duration=settings.default_chunk_duration,
        default_sample_rate=settings.default_sample_rate,
        default_language=settings.default_language,
    )


def get_status_store(store: BlobStore = Depends(get_blob_store)) -> ProcessingStatusStore:
    return ProcessingStatusStore(store)


def get_reconciler(
    store: BlobStore = Depends(get_blob_store),
    sessions: SessionMetadataStore = Depends(get_session_store)
) -> ChunkReconciler:
    return ChunkReconciler(store, sessions)
