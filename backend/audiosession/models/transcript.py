"""
Transcript Models - the rolling transcript placeholder written on session creation.
"""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import Field

from ..utils.clock import utc_now
from .base import DocumentModel


class TranscriptStats(DocumentModel):
    total_words: int = 0
    avg_confidence: float = 0
    speaker_changes: int = 0
    processing_latency: float = 0


class RollingTranscript(DocumentModel):
    session_id: str
    last_updated: datetime = Field(default_factory=utc_now)
    total_duration: float = 0
    segments: List[Dict[str, Any]] = Field(default_factory=list)
    stats: TranscriptStats = Field(default_factory=TranscriptStats)
