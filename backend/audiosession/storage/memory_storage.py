"""
In-memory Blob Store Implementation.
Objects live in a dict for the lifetime of the process; used for tests and
ephemeral runs.
"""

from typing import Dict, Optional, Tuple

from ..core.errors import NotFoundError
from .interface import BlobStore, ListObjectsResult, group_by_delimiter, paginate


class MemoryStorage(BlobStore):
    """Dict-backed blob store with the same listing semantics as LocalStorage."""

    def __init__(self, page_size: int = 1000):
        self.page_size = page_size
        self.objects: Dict[str, Tuple[bytes, str]] = {}

    async def get_object(self, key: str) -> bytes:
        try:
            return self.objects[key][0]
        except KeyError:
            raise NotFoundError(f"No object at key {key}") from None

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        self.objects[key] = (bytes(body), content_type)

    async def list_objects(
        self,
        prefix: str,
        delimiter: Optional[str] = None,
        continuation_token: Optional[str] = None,
        max_keys: Optional[int] = None
    ) -> ListObjectsResult:
        keys = [key for key in self.objects if key.startswith(prefix)]
        entries = group_by_delimiter(keys, prefix, delimiter)
        return paginate(entries, continuation_token, max_keys or self.page_size, delimiter)
