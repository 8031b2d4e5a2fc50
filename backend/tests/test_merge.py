"""
Unit tests for partial update merging.
"""

import pytest

from audiosession.core.merge import is_empty, merge_model
from audiosession.models import AudioInfo, AudioInfoUpdate, Session, SessionDetailsUpdate, SessionUpdate


@pytest.mark.parametrize("value,expected", [
    (None, True),
    ("", True),
    ([], True),
    ({}, True),
    (0, False),
    (0.0, False),
    (False, False),
    ("x", False),
    (["a"], False),
])
def test_is_empty(value, expected):
    assert is_empty(value) is expected


def test_merge_only_set_fields():
    current = AudioInfo(duration=12.5, chunk_count=3, chunk_duration=5)
    merged = merge_model(current, AudioInfoUpdate(chunk_count=4))

    assert merged.chunk_count == 4
    assert merged.duration == 12.5
    assert current.chunk_count == 3


def test_merge_zero_overwrites():
    merged = merge_model(AudioInfo(duration=12.5), AudioInfoUpdate(duration=0))
    assert merged.duration == 0


def test_merge_groups_one_level_deep():
    current = Session(session_id="s1", metadata={"title": "Planning", "tags": ["q3"]})
    merged = merge_model(current, SessionUpdate(metadata=SessionDetailsUpdate(description="notes", tags=[])))

    assert merged.metadata.title == "Planning"
    assert merged.metadata.description == "notes"
    assert merged.metadata.tags == ["q3"]
    assert merged.audio == current.audio


def test_merge_keeps_extra_fields():
    current = Session.model_validate({"sessionId": "s1", "recordingDevice": "phone"})
    merged = merge_model(current, SessionUpdate(status="completed"))

    assert merged.status == "completed"
    assert merged.to_document()["recordingDevice"] == "phone"
