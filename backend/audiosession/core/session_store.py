"""
Session Metadata Store - loads, creates and merges session.json documents.

Two layouts are understood:
- v2 (canonical): users/{userId}/audio/sessions/{sessionId}/session.json
- v1 (legacy, read-only): users/{userId}/audio/sessions/{YYYY-MM-DD}-{sessionId}/metadata.json

Updates are a read-modify-write over two round trips with no concurrency
token; concurrent writers to one session race and the last write wins.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..models import (
    AudioInfo, MetadataFields, ProcessingCounters, ProcessingStatus, RollingTranscript,
    Session, SessionDetails, SessionOptions, SessionSummary, SessionUpdate, TranscriptionProgress
)
from ..storage.interface import BlobStore
from ..utils.clock import Clock, utc_now
from .documents import read_document, write_document
from .errors import InvalidArgumentError, MalformedDocumentError, NotFoundError
from .merge import merge_model
from .paths import (
    DEFAULT_CHUNK_DURATION, derive_legacy_metadata_path, derive_session_paths, require_id, user_sessions_prefix
)

logger = logging.getLogger(__name__)


class LookupSource(str, Enum):
    """Which layout served a session document."""
    CANONICAL = "canonical"
    LEGACY = "legacy"
    NOT_FOUND = "not_found"


@dataclass
class SessionLookup:
    source: LookupSource
    key: Optional[str] = None
    session: Optional[Session] = None

    @property
    def found(self) -> bool:
        return self.session is not None


@dataclass
class InitializedSession:
    """The three documents written when a session is created."""
    session: Session
    processing_status: ProcessingStatus
    rolling_transcript: RollingTranscript


@dataclass
class UpsertResult:
    session: Session
    created: bool
    source: LookupSource


class SessionMetadataStore:
    """
    Manages the session.json document of each recording session.
    Holds no session state between calls; the blob store owns the documents.
    """

    def __init__(
        self,
        store: BlobStore,
        clock: Clock = utc_now,
        default_chunk_duration: int = DEFAULT_CHUNK_DURATION,
        default_sample_rate: int = 44100,
        default_language: str = "en"
    ):
        """
        Initialize the store.

        Args:
            store: Blob store holding the documents
            clock: Returns the current aware UTC datetime
            default_chunk_duration: Chunk duration when creation options omit it
            default_sample_rate: Sample rate when creation options omit it
            default_language: Transcription language when creation options omit it
        """
        self.store = store
        self.clock = clock
        self.default_chunk_duration = default_chunk_duration
        self.default_sample_rate = default_sample_rate
        self.default_language = default_language

    async def resolve(self, user_id: str, session_id: str) -> SessionLookup:
        """
        Find a session under the canonical layout, then the legacy one.

        The legacy key is built from today's date, not the session's
        creation date, so a legacy session only resolves on the day it was
        created.
        """
        paths = derive_session_paths(user_id, session_id)
        try:
            session = await read_document(self.store, paths.session_file, Session)
            return SessionLookup(LookupSource.CANONICAL, paths.session_file, session)
        except NotFoundError:
            pass

        legacy_key = derive_legacy_metadata_path(user_id, session_id, self.clock().date())
        try:
            session = await read_document(self.store, legacy_key, Session)
        except NotFoundError:
            return SessionLookup(LookupSource.NOT_FOUND)

        logger.info(
            "Session %s served from legacy layout", session_id,
            extra={'user_id': user_id, 'session_id': session_id, 'key': legacy_key}
        )
        return SessionLookup(LookupSource.LEGACY, legacy_key, session)

    async def load(self, user_id: str, session_id: str) -> Session:
        """
        Load a session document.

        Raises:
            NotFoundError: If neither the canonical nor the legacy key resolves
        """
        lookup = await self.resolve(user_id, session_id)
        if not lookup.found:
            raise NotFoundError(f"Session metadata not found for {session_id}")
        return lookup.session

    def default_session(
        self,
        user_id: str,
        session_id: str,
        user_email: str,
        options: SessionOptions
    ) -> Session:
        """Fresh session document with zeroed counters."""
        now = self.clock()
        return Session(
            session_id=session_id,
            user_id=user_id,
            user_email=user_email,
            created_at=now,
            updated_at=now,
            status="active",
            audio=AudioInfo(
                chunk_duration=options.chunk_duration or self.default_chunk_duration,
                sample_rate=options.sample_rate or self.default_sample_rate,
            ),
            transcription=TranscriptionProgress(language=options.language or self.default_language),
            processing=ProcessingCounters(last_heartbeat=now),
            metadata=SessionDetails(
                title=options.title,
                description=options.description,
                tags=options.tags,
                participants=options.participants,
                location=options.location,
                previous_session=options.previous_session,
                summary=options.summary,
                keywords=options.keywords,
                conversation_context=options.conversation_context,
            ),
        )

    async def create(
        self,
        user_id: str,
        session_id: str,
        options: Optional[SessionOptions] = None,
        user_email: str = "unknown"
    ) -> InitializedSession:
        """
        Write a new session: session.json, processing status and an empty
        rolling transcript.

        The three writes are independent. A failure part way leaves a
        partially initialized session; calling create again overwrites all
        three documents with fresh defaults.

        Raises:
            InvalidArgumentError: If an identifier sanitizes to empty
            StoreError: If any write fails
        """
        paths = derive_session_paths(user_id, session_id)
        user_id = require_id(user_id, 'user id')
        session_id = require_id(session_id, 'session id')

        session = self.default_session(user_id, session_id, user_email, options or SessionOptions())
        processing_status = ProcessingStatus(session_id=session_id, timestamp=session.created_at)
        rolling_transcript = RollingTranscript(session_id=session_id, last_updated=session.created_at)

        await write_document(self.store, paths.session_file, session)
        await write_document(self.store, paths.processing_status, processing_status)
        await write_document(self.store, paths.rolling_transcript, rolling_transcript)

        logger.info(
            "Initialized session %s (chunk duration %ss)", session_id, session.audio.chunk_duration,
            extra={'user_id': user_id, 'session_id': session_id}
        )
        return InitializedSession(session, processing_status, rolling_transcript)

    async def update(
        self,
        user_id: str,
        session_id: str,
        updates: SessionUpdate,
        existing: Optional[Session] = None
    ) -> Session:
        """
        Merge a partial update into a session and rewrite it.

        Args:
            user_id: Owner of the session
            session_id: Session identifier
            updates: Groups/fields to change; empty values keep the old value
            existing: Current document, loaded when not supplied

        Returns:
            Session: The merged document as written

        Raises:
            NotFoundError: If existing is not supplied and the session does not resolve
        """
        paths = derive_session_paths(user_id, session_id)
        if existing is None:
            existing = await self.load(user_id, session_id)

        merged = merge_model(existing, updates)
        merged = merged.model_copy(update={'updated_at': self.clock()})

        # Always the canonical key; a legacy-served session moves to v2 here
        await write_document(self.store, paths.session_file, merged)
        logger.info("Updated session %s", session_id, extra={'user_id': user_id, 'session_id': session_id})
        return merged

    async def upsert(
        self,
        user_id: str,
        session_id: str,
        fields: MetadataFields,
        user_email: str = "unknown"
    ) -> UpsertResult:
        """
        Apply client metadata to a session, creating the session on a miss.

        On creation, descriptive fields and chunk duration become creation
        options; duration and chunk count start at zero.
        """
        lookup = await self.resolve(user_id, session_id)
        if lookup.found:
            session = await self.update(user_id, session_id, fields.to_update(), existing=lookup.session)
            return UpsertResult(session=session, created=False, source=lookup.source)

        initialized = await self.create(user_id, session_id, fields.to_options(), user_email=user_email)
        return UpsertResult(session=initialized.session, created=True, source=LookupSource.NOT_FOUND)

    async def list_sessions(self, user_id: str) -> List[SessionSummary]:
        """
        List every session folder of a user, newest first.

        Folders whose document does not resolve are listed with metadata None.
        """
        prefix = user_sessions_prefix(user_id)
        listing = await self.store.list_all(prefix, delimiter='/')

        sessions = []
        for folder_prefix in listing.common_prefixes:
            folder = folder_prefix[len(prefix):].rstrip('/')
            try:
                lookup = await self.resolve(user_id, folder)
            except InvalidArgumentError:
                lookup = SessionLookup(LookupSource.NOT_FOUND)
            except MalformedDocumentError as e:
                logger.warning(
                    "Listing session folder %s without metadata: %s", folder, e,
                    extra={'user_id': user_id, 'session_id': folder}
                )
                lookup = SessionLookup(LookupSource.NOT_FOUND)

            if lookup.found:
                sessions.append(SessionSummary(
                    session_id=lookup.session.session_id or folder,
                    folder=folder,
                    metadata=lookup.session,
                ))
            else:
                sessions.append(SessionSummary(session_id=folder, folder=folder))

        sessions.sort(
            key=lambda s: s.metadata.created_at.isoformat() if s.metadata else s.folder,
            reverse=True
        )
        return sessions
