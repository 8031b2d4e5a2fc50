"""
Local Filesystem Blob Store Implementation.
This implementation stores every object as a file under a base directory.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import aiofiles

from ..core.errors import NotFoundError, StoreError
from .interface import BlobStore, ListObjectsResult, group_by_delimiter, paginate

logger = logging.getLogger(__name__)

META_SUFFIX = '.meta'


class LocalStorage(BlobStore):
    """
    Local filesystem blob store.
    Object keys map to relative paths under base_dir; the content type of
    each object is kept in a JSON sidecar next to it.
    """

    def __init__(self, base_dir: str = "./data", page_size: int = 1000):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored objects
            page_size: Default number of entries per list page
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.page_size = page_size

    def _get_full_path(self, key: str) -> Path:
        """Convert an object key to an absolute path within base directory."""
        full_path = (self.base_dir / key).resolve()

        # Security check: ensure path is within base_dir
        if full_path != self.base_dir and self.base_dir not in full_path.parents:
            raise StoreError(f"Invalid key: {key} - path traversal detected")

        return full_path

    async def get_object(self, key: str) -> bytes:
        full_path = self._get_full_path(key)
        if not full_path.is_file():
            raise NotFoundError(f"No object at key {key}")

        try:
            async with aiofiles.open(full_path, 'rb') as f:
                return await f.read()
        except OSError as e:
            raise StoreError(f"Error reading {key}: {e}") from e

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        full_path = self._get_full_path(key)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(full_path, 'wb') as f:
                await f.write(body)

            metadata_path = full_path.with_name(full_path.name + META_SUFFIX)
            async with aiofiles.open(metadata_path, 'w', encoding='utf-8') as f:
                await f.write(json.dumps({'content_type': content_type, 'size': len(body)}))
        except OSError as e:
            raise StoreError(f"Error writing {key}: {e}") from e

        logger.debug("Stored %s (%d bytes, %s)", key, len(body), content_type)

    async def get_content_type(self, key: str) -> Optional[str]:
        """Content type recorded at write time, or None if unknown."""
        metadata_path = self._get_full_path(key + META_SUFFIX)
        if not metadata_path.is_file():
            return None
        async with aiofiles.open(metadata_path, 'r', encoding='utf-8') as f:
            return json.loads(await f.read()).get('content_type')

    def _walk_keys(self, prefix: str) -> List[str]:
        """Every stored key starting with prefix."""
        # Only descend from the deepest directory the prefix names
        directory, _, _ = prefix.rpartition('/')
        root = self._get_full_path(directory) if directory else self.base_dir
        if not root.is_dir():
            return []

        keys = []
        for dirpath, _, filenames in os.walk(root):
            for filename in filenames:
                if filename.endswith(META_SUFFIX):
                    continue
                key = Path(dirpath, filename).relative_to(self.base_dir).as_posix()
                if key.startswith(prefix):
                    keys.append(key)
        return keys

    async def list_objects(
        self,
        prefix: str,
        delimiter: Optional[str] = None,
        continuation_token: Optional[str] = None,
        max_keys: Optional[int] = None
    ) -> ListObjectsResult:
        try:
            keys = self._walk_keys(prefix)
        except OSError as e:
            raise StoreError(f"Error listing {prefix}: {e}") from e

        entries = group_by_delimiter(keys, prefix, delimiter)
        return paginate(entries, continuation_token, max_keys or self.page_size, delimiter)
