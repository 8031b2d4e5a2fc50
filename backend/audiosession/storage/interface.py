"""
Blob Store Interface - Abstract base class for all blob store implementations.
This interface enables switching between Local, in-memory, S3, etc.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ListObjectsResult:
    """One page (or a drained sequence of pages) of a prefix listing."""
    keys: List[str] = field(default_factory=list)
    common_prefixes: List[str] = field(default_factory=list)
    continuation_token: Optional[str] = None


class BlobStore(ABC):
    """
    Key-addressed object storage with get/put/list-by-prefix.

    Keys are '/'-separated strings. Implementations raise NotFoundError for
    absent keys and StoreError for any transport or permission failure.
    """

    @abstractmethod
    async def get_object(self, key: str) -> bytes:
        """
        Read the object stored at key.

        Args:
            key: Object key (e.g., "users/u1/audio/sessions/s1/session.json")

        Returns:
            bytes: Object body

        Raises:
            NotFoundError: If nothing is stored at key
            StoreError: On any other failure
        """

    @abstractmethod
    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        """
        Write body at key, replacing any existing object.

        Args:
            key: Object key
            body: Object body
            content_type: MIME type recorded with the object

        Raises:
            StoreError: If the write fails
        """

    @abstractmethod
    async def list_objects(
        self,
        prefix: str,
        delimiter: Optional[str] = None,
        continuation_token: Optional[str] = None,
        max_keys: Optional[int] = None
    ) -> ListObjectsResult:
        """
        List one page of keys under prefix.

        With a delimiter, keys containing the delimiter after the prefix are
        rolled up into common_prefixes (each ending with the delimiter).

        Args:
            prefix: Key prefix to list
            delimiter: Optional grouping delimiter, usually "/"
            continuation_token: Token from a previous page
            max_keys: Page size override

        Returns:
            ListObjectsResult: Sorted keys and prefixes, plus a token if more remain
        """

    async def list_all(self, prefix: str, delimiter: Optional[str] = None) -> ListObjectsResult:
        """Follow continuation tokens until the listing is exhausted."""
        result = ListObjectsResult()
        token = None
        while True:
            page = await self.list_objects(prefix, delimiter=delimiter, continuation_token=token)
            result.keys.extend(page.keys)
            result.common_prefixes.extend(page.common_prefixes)
            token = page.continuation_token
            if not token:
                return result


def paginate(
    entries: List[str],
    continuation_token: Optional[str],
    page_size: int,
    delimiter: Optional[str] = None
) -> ListObjectsResult:
    """
    Slice a sorted list of keys and prefixes into a page.

    The continuation token is the last entry returned; the next page starts
    strictly after it. With a delimiter, entries ending with it are common
    prefixes.
    """
    if continuation_token:
        entries = [entry for entry in entries if entry > continuation_token]

    page = entries[:page_size]
    token = page[-1] if len(entries) > page_size else None

    def is_prefix(entry: str) -> bool:
        return bool(delimiter) and entry.endswith(delimiter)

    return ListObjectsResult(
        keys=[entry for entry in page if not is_prefix(entry)],
        common_prefixes=[entry for entry in page if is_prefix(entry)],
        continuation_token=token
    )


def group_by_delimiter(keys: List[str], prefix: str, delimiter: Optional[str]) -> List[str]:
    """Roll keys up into common prefixes the way S3-style listings do."""
    if not delimiter:
        return sorted(keys)

    entries = set()
    for key in keys:
        rest = key[len(prefix):]
        index = rest.find(delimiter)
        if index == -1:
            entries.add(key)
        else:
            entries.add(prefix + rest[:index + len(delimiter)])
    return sorted(entries)
