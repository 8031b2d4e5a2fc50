"""
Path Deriver - maps (user, session, chunk ordinal, duration) to blob keys.

Chunk keys encode the chunk's time range [start, end) in whole seconds,
zero-padded to five digits, e.g. chunk 12 of a 5s session is
"chunks/00055-00060.webm".
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Tuple

from .errors import InvalidArgumentError

_UNSAFE_ID_CHARS = re.compile(r'[^A-Za-z0-9_-]')

TIMESTAMP_WIDTH = 5
CHUNK_EXTENSION = '.webm'
TRANSCRIPT_EXTENSION = '.json'
DEFAULT_CHUNK_DURATION = 5


@dataclass(frozen=True)
class SessionPaths:
    """Every key of one session under the v2 layout."""
    base_path: str
    session_file: str
    chunks_path: str
    transcripts_path: str
    analysis_path: str
    processing_path: str
    exports_path: str
    rolling_transcript: str
    final_transcript: str
    timeline_analysis: str
    speaker_analysis: str
    processing_status: str
    transcription_queue: str
    analysis_queue: str


def _require_positive_int(value, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidArgumentError(f"{name} must be >= {minimum}, got {value}")
    return value


def derive_timestamp_range(chunk_number: int, chunk_duration: int) -> Tuple[str, str]:
    """
    Render the [start, end) seconds of a chunk.

    >>> derive_timestamp_range(12, 5)
    ('00055', '00060')

    Raises:
        InvalidArgumentError: If chunk_number < 1 or chunk_duration <= 0
    """
    _require_positive_int(chunk_number, "chunk_number", 1)
    _require_positive_int(chunk_duration, "chunk_duration", 1)

    start = (chunk_number - 1) * chunk_duration
    end = chunk_number * chunk_duration
    return f"{start:0{TIMESTAMP_WIDTH}d}", f"{end:0{TIMESTAMP_WIDTH}d}"


def sanitize_id(raw: str) -> str:
    """Strip every character outside [A-Za-z0-9_-]."""
    return _UNSAFE_ID_CHARS.sub('', raw or '')


def require_id(raw: str, field: str = "id") -> str:
    """
    Sanitize an identifier and reject it if nothing is left.

    Raises:
        InvalidArgumentError: If the sanitized identifier is empty
    """
    clean = sanitize_id(raw)
    if not clean:
        raise InvalidArgumentError(f"Invalid {field}: {raw!r}")
    return clean


def user_sessions_prefix(user_id: str) -> str:
    """Prefix under which every session folder of a user lives."""
    return f"users/{require_id(user_id, 'user id')}/audio/sessions/"


def derive_session_paths(user_id: str, session_id: str) -> SessionPaths:
    """Keys of a session's documents, built from sanitized identifiers."""
    base_path = user_sessions_prefix(user_id) + require_id(session_id, 'session id')

    return SessionPaths(
        base_path=base_path,
        session_file=f"{base_path}/session.json",
        chunks_path=f"{base_path}/chunks/",
        transcripts_path=f"{base_path}/transcripts/",
        analysis_path=f"{base_path}/analysis/",
        processing_path=f"{base_path}/processing/",
        exports_path=f"{base_path}/exports/",
        rolling_transcript=f"{base_path}/transcripts/rolling.json",
        final_transcript=f"{base_path}/transcripts/final.json",
        timeline_analysis=f"{base_path}/analysis/timeline.json",
        speaker_analysis=f"{base_path}/analysis/speakers.json",
        processing_status=f"{base_path}/processing/status.json",
        transcription_queue=f"{base_path}/processing/transcription-queue.json",
        analysis_queue=f"{base_path}/processing/analysis-queue.json",
    )


def derive_chunk_path(
    user_id: str,
    session_id: str,
    chunk_number: int,
    chunk_duration: int = DEFAULT_CHUNK_DURATION
) -> str:
    start, end = derive_timestamp_range(chunk_number, chunk_duration)
    return f"{derive_session_paths(user_id, session_id).chunks_path}{start}-{end}{CHUNK_EXTENSION}"


def derive_transcript_path(
    user_id: str,
    session_id: str,
    chunk_number: int,
    chunk_duration: int = DEFAULT_CHUNK_DURATION
) -> str:
    start, end = derive_timestamp_range(chunk_number, chunk_duration)
    return f"{derive_session_paths(user_id, session_id).transcripts_path}{start}-{end}{TRANSCRIPT_EXTENSION}"


def derive_legacy_metadata_path(user_id: str, session_id: str, on_date: date) -> str:
    """v1 layout: the session folder is prefixed with a YYYY-MM-DD date."""
    return f"{user_sessions_prefix(user_id)}{on_date.isoformat()}-{require_id(session_id, 'session id')}/metadata.json"
