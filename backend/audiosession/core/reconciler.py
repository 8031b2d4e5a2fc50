"""
Chunk Reconciler - works out which chunks of a session never arrived.

Chunks carry no stored ordinal. It is recovered from the time range in the
key: ordinal = start // (end - start) + 1. That inversion only holds when
every chunk of the session was recorded with the same duration.
"""

import logging
import re
from typing import Iterable, List, Optional, Tuple

from ..models import ReconciliationReport
from ..storage.interface import BlobStore
from .errors import MalformedDocumentError, NotFoundError
from .paths import CHUNK_EXTENSION, derive_session_paths, require_id
from .session_store import SessionMetadataStore

logger = logging.getLogger(__name__)

_CHUNK_KEY = re.compile(r'(\d{5})-(\d{5})' + re.escape(CHUNK_EXTENSION) + r'$')


def parse_chunk_key(key: str) -> Optional[Tuple[int, int]]:
    """(start, end) seconds encoded in a chunk key, or None for other keys."""
    match = _CHUNK_KEY.search(key)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def recover_ordinal(start: int, end: int) -> int:
    """1-based chunk number of the range [start, end)."""
    if end <= start:
        raise ValueError(f"Empty chunk range {start}-{end}")
    return start // (end - start) + 1


def diff_against_expected(expected_count: int, uploaded: Iterable[int]) -> Tuple[List[int], List[int]]:
    """
    Split 1..expected_count into what arrived and what is missing.

    >>> diff_against_expected(5, [1, 2, 4])
    ([1, 2, 4], [3, 5])
    """
    uploaded_set = set(uploaded)
    missing = [number for number in range(1, expected_count + 1) if number not in uploaded_set]
    return sorted(uploaded_set), missing


class ChunkReconciler:
    """Compares the chunks present in the blob store with a session's chunk count."""

    def __init__(self, store: BlobStore, sessions: SessionMetadataStore):
        self.store = store
        self.sessions = sessions

    async def list_uploaded_ordinals(self, user_id: str, session_id: str) -> List[int]:
        """Ordinals of every chunk stored for the session, sorted, listing fully drained."""
        paths = derive_session_paths(user_id, session_id)
        listing = await self.store.list_all(paths.chunks_path)

        ordinals = set()
        for key in listing.keys:
            if not key.endswith(CHUNK_EXTENSION):
                continue
            chunk_range = parse_chunk_key(key)
            if chunk_range is None:
                logger.debug("Skipping unrecognized chunk key %s", key, extra={'key': key})
                continue
            start, end = chunk_range
            if end <= start:
                logger.warning("Skipping chunk key with empty range %s", key, extra={'key': key})
                continue
            ordinals.add(recover_ordinal(start, end))
        return sorted(ordinals)

    async def reconcile(self, user_id: str, session_id: str) -> ReconciliationReport:
        """
        Report uploaded and missing chunks of a session.

        The listing is read before the session document, so a chunk stored
        in between is reported as missing until the next call.
        """
        clean_session_id = require_id(session_id, 'session id')
        uploaded = await self.list_uploaded_ordinals(user_id, session_id)

        try:
            session = await self.sessions.load(user_id, session_id)
        except NotFoundError:
            logger.info(
                "No metadata for session %s; expected chunk count unknown", clean_session_id,
                extra={'user_id': user_id, 'session_id': clean_session_id}
            )
            return ReconciliationReport(
                session_id=clean_session_id,
                uploaded_chunks=uploaded,
                error="No metadata found for session",
            )
        except MalformedDocumentError as e:
            logger.warning(
                "Unreadable metadata for session %s; expected chunk count unknown: %s", clean_session_id, e,
                extra={'user_id': user_id, 'session_id': clean_session_id}
            )
            return ReconciliationReport(
                session_id=clean_session_id,
                uploaded_chunks=uploaded,
                error="Session metadata is unreadable",
            )

        expected = session.audio.chunk_count
        uploaded, missing = diff_against_expected(expected, uploaded)
        return ReconciliationReport(
            session_id=clean_session_id,
            uploaded_chunks=uploaded,
            missing_chunks=missing,
            expected_chunks=expected,
        )
