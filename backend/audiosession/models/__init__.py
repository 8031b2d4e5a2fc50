"""Models module."""

from .session import (
    AudioInfo, TranscriptionProgress, AnalysisProgress, ProcessingCounters, SessionDetails, Session,
    AudioInfoUpdate, TranscriptionProgressUpdate, AnalysisProgressUpdate, ProcessingCountersUpdate,
    SessionDetailsUpdate, SessionUpdate, SessionOptions, MetadataFields, SessionSummary
)
from .processing import (
    UploadProgress, StageProgress, RealtimeStats, ProcessingStatus,
    UploadProgressUpdate, StageProgressUpdate, RealtimeStatsUpdate, ProcessingStatusUpdate
)
from .transcript import TranscriptStats, RollingTranscript
from .reconciliation import ReconciliationReport

__all__ = [
    'AudioInfo', 'TranscriptionProgress', 'AnalysisProgress', 'ProcessingCounters', 'SessionDetails', 'Session',
    'AudioInfoUpdate', 'TranscriptionProgressUpdate', 'AnalysisProgressUpdate', 'ProcessingCountersUpdate',
    'SessionDetailsUpdate', 'SessionUpdate', 'SessionOptions', 'MetadataFields', 'SessionSummary',
    'UploadProgress', 'StageProgress', 'RealtimeStats', 'ProcessingStatus',
    'UploadProgressUpdate', 'StageProgressUpdate', 'RealtimeStatsUpdate', 'ProcessingStatusUpdate',
    'TranscriptStats', 'RollingTranscript', 'ReconciliationReport'
]
