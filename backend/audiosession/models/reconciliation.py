"""
Reconciliation Models - uploaded versus missing chunks of a session.
"""

from typing import List, Optional

from pydantic import Field, computed_field

from .base import DocumentModel


class ReconciliationReport(DocumentModel):
    """
    Uploaded and missing chunk ordinals of one session.

    When the session document is unavailable the expected count is unknown:
    expected_chunks is None, missing_chunks is empty and error says why.
    """
    session_id: str
    expected_chunks: Optional[int] = None
    uploaded_chunks: List[int] = Field(default_factory=list)
    missing_chunks: List[int] = Field(default_factory=list)
    error: Optional[str] = None

    @computed_field(alias='expectedKnown')
    @property
    def expected_known(self) -> bool:
        return self.expected_chunks is not None
