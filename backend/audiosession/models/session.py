"""
Session Models - the session.json document and its partial updates.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from ..utils.clock import utc_now
from .base import DocumentModel, UpdateModel


class AudioInfo(DocumentModel):
    """Recording parameters and counters."""
    duration: float = 0
    chunk_count: int = 0
    chunk_duration: int = Field(default=5, gt=0)  # seconds, constant per session
    sample_rate: int = 44100
    format: str = "webm"


class TranscriptionProgress(DocumentModel):
    status: str = "pending"
    provider: str = "whisper"
    model: str = "whisper-1"
    language: str = "en"
    confidence: float = 0
    processed_chunks: int = 0
    total_chunks: int = 0
    last_processed_at: Optional[datetime] = None


class AnalysisProgress(DocumentModel):
    status: str = "pending"
    topics_detected: List[Any] = Field(default_factory=list)
    speaker_count: int = 0
    decisions_count: int = 0
    action_items_count: int = 0
    last_analyzed_at: Optional[datetime] = None


class ProcessingCounters(DocumentModel):
    transcription_queue: int = 0
    analysis_queue: int = 0
    error_count: int = 0
    last_heartbeat: Optional[datetime] = None


class SessionDetails(DocumentModel):
    """Free-form descriptive fields (stored under "metadata")."""
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    participants: List[str] = Field(default_factory=list)
    location: str = ""
    previous_session: Optional[str] = None
    next_session: Optional[str] = None
    # Legacy fields
    summary: Optional[str] = None
    keywords: Optional[List[str]] = None
    conversation_context: Optional[str] = None


class Session(DocumentModel):
    """Aggregate root for one recording session."""
    session_id: str = ""
    user_id: str = ""
    user_email: str = "unknown"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    status: str = "active"
    audio: AudioInfo = Field(default_factory=AudioInfo)
    transcription: TranscriptionProgress = Field(default_factory=TranscriptionProgress)
    analysis: AnalysisProgress = Field(default_factory=AnalysisProgress)
    processing: ProcessingCounters = Field(default_factory=ProcessingCounters)
    metadata: SessionDetails = Field(default_factory=SessionDetails)


class AudioInfoUpdate(UpdateModel):
    duration: Optional[float] = None
    chunk_count: Optional[int] = Field(default=None, ge=0)
    chunk_duration: Optional[int] = Field(default=None, gt=0)
    sample_rate: Optional[int] = None
    format: Optional[str] = None


class TranscriptionProgressUpdate(UpdateModel):
    status: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    language: Optional[str] = None
    confidence: Optional[float] = None
    processed_chunks: Optional[int] = None
    total_chunks: Optional[int] = None
    last_processed_at: Optional[datetime] = None


class AnalysisProgressUpdate(UpdateModel):
    status: Optional[str] = None
    topics_detected: Optional[List[Any]] = None
    speaker_count: Optional[int] = None
    decisions_count: Optional[int] = None
    action_items_count: Optional[int] = None
    last_analyzed_at: Optional[datetime] = None


class ProcessingCountersUpdate(UpdateModel):
    transcription_queue: Optional[int] = None
    analysis_queue: Optional[int] = None
    error_count: Optional[int] = None
    last_heartbeat: Optional[datetime] = None


class SessionDetailsUpdate(UpdateModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    participants: Optional[List[str]] = None
    location: Optional[str] = None
    previous_session: Optional[str] = None
    next_session: Optional[str] = None
    summary: Optional[str] = None
    keywords: Optional[List[str]] = None
    conversation_context: Optional[str] = None


class SessionUpdate(UpdateModel):
    """Partial update of a session, one optional group per document group."""
    status: Optional[str] = None
    audio: Optional[AudioInfoUpdate] = None
    transcription: Optional[TranscriptionProgressUpdate] = None
    analysis: Optional[AnalysisProgressUpdate] = None
    processing: Optional[ProcessingCountersUpdate] = None
    metadata: Optional[SessionDetailsUpdate] = None


class SessionOptions(UpdateModel):
    """Options applied to a freshly created session."""
    chunk_duration: Optional[int] = Field(default=None, gt=0)
    sample_rate: Optional[int] = None
    language: Optional[str] = None
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    participants: List[str] = Field(default_factory=list)
    location: str = ""
    previous_session: Optional[str] = None
    summary: Optional[str] = None
    keywords: Optional[List[str]] = None
    conversation_context: Optional[str] = None


# Flat metadata fields that belong to the "audio" group
AUDIO_FIELDS = ('duration', 'chunk_count', 'chunk_duration')


class MetadataFields(UpdateModel):
    """
    Flat metadata as sent by recording clients.

    Audio counters and descriptive fields arrive side by side and are routed
    into the "audio" and "metadata" groups.
    """
    duration: Optional[float] = None
    chunk_count: Optional[int] = Field(default=None, ge=0)
    chunk_duration: Optional[int] = Field(default=None, gt=0)
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    participants: Optional[List[str]] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    keywords: Optional[List[str]] = None
    conversation_context: Optional[str] = None

    def to_update(self) -> SessionUpdate:
        """
        Route the fields into groups. Falsy values (0, False, "", []) are
        dropped, so a client re-sending zeroed counters keeps the stored ones.
        """
        fields = {name: value for name, value in self.model_dump(exclude_unset=True).items() if value}
        audio = {name: fields.pop(name) for name in AUDIO_FIELDS if name in fields}
        return SessionUpdate(
            audio=AudioInfoUpdate(**audio),
            metadata=SessionDetailsUpdate(**fields),
        )

    def to_options(self) -> SessionOptions:
        fields = self.model_dump(exclude_unset=True, exclude_none=True, exclude={'duration', 'chunk_count'})
        return SessionOptions(**fields)


class SessionSummary(DocumentModel):
    """One entry of a user's session listing."""
    session_id: str
    folder: str
    metadata: Optional[Session] = None
