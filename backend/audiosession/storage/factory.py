"""
Blob Store Factory - Creates the configured blob store and holds the
process-wide instance used by the HTTP layer.
"""

from typing import Optional

from .interface import BlobStore
from .local_storage import LocalStorage
from .memory_storage import MemoryStorage


def create_blob_store(
    storage_type: str = "local",
    base_dir: str = "./data",
    page_size: int = 1000
) -> BlobStore:
    """
    Create a blob store instance based on configuration.

    Args:
        storage_type: Store name ("local" or "memory")
        base_dir: Base directory for the local store
        page_size: Entries per list page

    Returns:
        BlobStore instance
    """
    if storage_type == "local":
        return LocalStorage(base_dir, page_size=page_size)

    elif storage_type == "memory":
        return MemoryStorage(page_size=page_size)

    else:
        raise ValueError(f"Unsupported storage type: {storage_type}")


# Global blob store instance
_blob_store: Optional[BlobStore] = None


def init_blob_store(store: BlobStore) -> None:
    """Install the process-wide blob store."""
    global _blob_store
    _blob_store = store


def get_blob_store() -> BlobStore:
    """
    Get the process-wide blob store.

    Raises:
        RuntimeError: If the blob store has not been initialized
    """
    if _blob_store is None:
        raise RuntimeError("Blob store not initialized. Call init_blob_store() first.")
    return _blob_store
