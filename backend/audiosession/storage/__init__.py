"""Storage module - provides the blob store interface and implementations."""

from .interface import BlobStore, ListObjectsResult
from .local_storage import LocalStorage
from .memory_storage import MemoryStorage
from .factory import create_blob_store, init_blob_store, get_blob_store

__all__ = [
    'BlobStore', 'ListObjectsResult', 'LocalStorage', 'MemoryStorage',
    'create_blob_store', 'init_blob_store', 'get_blob_store'
]
