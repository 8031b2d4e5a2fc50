"""
Shared test fixtures and configuration.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_TYPE", "memory")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/audiosession_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

from audiosession.core.reconciler import ChunkReconciler  # noqa: E402
from audiosession.core.session_store import SessionMetadataStore  # noqa: E402
from audiosession.core.status_store import ProcessingStatusStore  # noqa: E402
from audiosession.storage import LocalStorage, MemoryStorage  # noqa: E402


class StepClock:
    """Deterministic clock that moves forward one second per call."""

    def __init__(self, start: datetime = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        return now


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def memory_store():
    return MemoryStorage()


@pytest.fixture
def local_store(tmp_path):
    return LocalStorage(str(tmp_path / "blobs"), page_size=2)


@pytest.fixture
def session_store(memory_store, clock):
    return SessionMetadataStore(memory_store, clock=clock)


@pytest.fixture
def status_store(memory_store, clock):
    return ProcessingStatusStore(memory_store, clock=clock)


@pytest.fixture
def reconciler(memory_store, session_store):
    return ChunkReconciler(memory_store, session_store)
