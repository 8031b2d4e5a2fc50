"""
Processing Status Models - the denormalized processing/status.json document.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..utils.clock import utc_now
from .base import DocumentModel, UpdateModel


class UploadProgress(DocumentModel):
    chunks_uploaded: int = 0
    chunks_expected: int = 0
    upload_complete: bool = False
    last_chunk_at: Optional[datetime] = None


class StageProgress(DocumentModel):
    """Counters of one chunk pipeline stage (transcription or analysis)."""
    chunks_queued: int = 0
    chunks_processing: int = 0
    chunks_completed: int = 0
    chunks_failed: int = 0
    estimated_completion: Optional[datetime] = None


class RealtimeStats(DocumentModel):
    connected_clients: int = 0
    last_broadcast: Optional[datetime] = None
    queue_depth: int = 0


class ProcessingStatus(DocumentModel):
    """Upload/transcription/analysis counters of one session."""
    session_id: str
    timestamp: datetime = Field(default_factory=utc_now)
    audio: UploadProgress = Field(default_factory=UploadProgress)
    transcription: StageProgress = Field(default_factory=StageProgress)
    analysis: StageProgress = Field(default_factory=StageProgress)
    realtime: RealtimeStats = Field(default_factory=RealtimeStats)


class UploadProgressUpdate(UpdateModel):
    chunks_uploaded: Optional[int] = None
    chunks_expected: Optional[int] = None
    upload_complete: Optional[bool] = None
    last_chunk_at: Optional[datetime] = None


class StageProgressUpdate(UpdateModel):
    chunks_queued: Optional[int] = None
    chunks_processing: Optional[int] = None
    chunks_completed: Optional[int] = None
    chunks_failed: Optional[int] = None
    estimated_completion: Optional[datetime] = None


class RealtimeStatsUpdate(UpdateModel):
    connected_clients: Optional[int] = None
    last_broadcast: Optional[datetime] = None
    queue_depth: Optional[int] = None


class ProcessingStatusUpdate(UpdateModel):
    audio: Optional[UploadProgressUpdate] = None
    transcription: Optional[StageProgressUpdate] = None
    analysis: Optional[StageProgressUpdate] = None
    realtime: Optional[RealtimeStatsUpdate] = None
