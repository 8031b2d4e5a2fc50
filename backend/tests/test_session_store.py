"""
Unit tests for SessionMetadataStore.
"""

import json

import pytest

from audiosession.core.errors import InvalidArgumentError, MalformedDocumentError, NotFoundError, StoreError
from audiosession.core.session_store import LookupSource, SessionMetadataStore
from audiosession.models import (
    AudioInfoUpdate, MetadataFields, SessionDetailsUpdate, SessionOptions, SessionUpdate,
    TranscriptionProgressUpdate
)
from audiosession.storage import MemoryStorage

CANONICAL_KEY = "users/u1/audio/sessions/s1/session.json"


def _document(store, key):
    return json.loads(store.objects[key][0])


class TestCreate:
    """Tests for session initialization."""

    @pytest.mark.asyncio
    async def test_create_writes_three_documents(self, session_store, memory_store):
        result = await session_store.create("u1", "s1", SessionOptions(chunk_duration=5), user_email="a@b.c")

        assert result.session.audio.chunk_count == 0
        assert result.session.audio.chunk_duration == 5
        assert set(memory_store.objects) == {
            CANONICAL_KEY,
            "users/u1/audio/sessions/s1/processing/status.json",
            "users/u1/audio/sessions/s1/transcripts/rolling.json",
        }

        stored = _document(memory_store, CANONICAL_KEY)
        assert stored["sessionId"] == "s1"
        assert stored["userId"] == "u1"
        assert stored["userEmail"] == "a@b.c"
        assert stored["status"] == "active"
        assert stored["audio"] == {
            "duration": 0, "chunkCount": 0, "chunkDuration": 5, "sampleRate": 44100, "format": "webm"
        }
        assert stored["transcription"]["status"] == "pending"
        assert stored["analysis"]["status"] == "pending"
        assert stored["processing"]["lastHeartbeat"] == stored["createdAt"]

        transcript = _document(memory_store, "users/u1/audio/sessions/s1/transcripts/rolling.json")
        assert transcript["segments"] == []
        assert transcript["stats"]["totalWords"] == 0

        status = _document(memory_store, "users/u1/audio/sessions/s1/processing/status.json")
        assert status["audio"]["chunksUploaded"] == 0
        assert status["realtime"]["connectedClients"] == 0

    @pytest.mark.asyncio
    async def test_options_go_into_metadata(self, session_store):
        options = SessionOptions(
            title="Test Meeting",
            participants=["Alice", "Bob"],
            tags=["weekly"],
            language="de",
            sample_rate=48000,
        )
        session = (await session_store.create("u1", "s1", options)).session

        assert session.metadata.title == "Test Meeting"
        assert session.metadata.participants == ["Alice", "Bob"]
        assert session.metadata.tags == ["weekly"]
        assert session.transcription.language == "de"
        assert session.audio.sample_rate == 48000
        assert session.audio.chunk_duration == 5

    @pytest.mark.asyncio
    async def test_create_overwrites(self, session_store):
        await session_store.create("u1", "s1", SessionOptions(title="first"))
        await session_store.update("u1", "s1", SessionUpdate(audio=AudioInfoUpdate(chunk_count=9)))

        await session_store.create("u1", "s1")
        session = await session_store.load("u1", "s1")
        assert session.audio.chunk_count == 0
        assert session.metadata.title == ""

    @pytest.mark.asyncio
    async def test_create_rejects_empty_id(self, session_store, memory_store):
        with pytest.raises(InvalidArgumentError):
            await session_store.create("u1", "../")
        assert memory_store.objects == {}

    @pytest.mark.asyncio
    async def test_partial_create_is_not_rolled_back(self, clock):
        class FailingStore(MemoryStorage):
            async def put_object(self, key, body, content_type):
                if key.endswith("status.json"):
                    raise StoreError("access denied")
                await super().put_object(key, body, content_type)

        store = FailingStore()
        sessions = SessionMetadataStore(store, clock=clock)
        with pytest.raises(StoreError):
            await sessions.create("u1", "s1")
        assert list(store.objects) == [CANONICAL_KEY]


class TestLoad:
    """Tests for canonical and legacy lookup."""

    @pytest.mark.asyncio
    async def test_canonical(self, session_store):
        await session_store.create("u1", "s1")
        lookup = await session_store.resolve("u1", "s1")

        assert lookup.source == LookupSource.CANONICAL
        assert lookup.key == CANONICAL_KEY
        assert lookup.session.session_id == "s1"

    @pytest.mark.asyncio
    async def test_legacy_fallback_uses_today(self, session_store, memory_store):
        legacy_key = "users/u1/audio/sessions/2026-10-18-s1/metadata.json"
        legacy = {
            "sessionId": "s1",
            "userId": "u1",
            "createdAt": "2026-10-18T08:00:00.000Z",
            "audio": {"chunkCount": 3, "chunkDuration": 10},
            "metadata": {"title": "old", "summary": "legacy summary"},
            "recordingDevice": "phone",
        }
        await memory_store.put_object(legacy_key, json.dumps(legacy).encode(), "application/json")

        lookup = await session_store.resolve("u1", "s1")
        assert lookup.source == LookupSource.LEGACY
        assert lookup.key == legacy_key

        session = await session_store.load("u1", "s1")
        assert session.audio.chunk_count == 3
        assert session.audio.chunk_duration == 10
        assert session.metadata.summary == "legacy summary"

    @pytest.mark.asyncio
    async def test_legacy_from_another_day_not_found(self, session_store, memory_store):
        legacy_key = "users/u1/audio/sessions/2026-10-17-s1/metadata.json"
        await memory_store.put_object(legacy_key, b'{"sessionId": "s1"}', "application/json")

        with pytest.raises(NotFoundError):
            await session_store.load("u1", "s1")

    @pytest.mark.asyncio
    async def test_not_found(self, session_store):
        lookup = await session_store.resolve("u1", "missing")
        assert lookup.source == LookupSource.NOT_FOUND
        assert not lookup.found

        with pytest.raises(NotFoundError):
            await session_store.load("u1", "missing")

    @pytest.mark.asyncio
    async def test_malformed_document(self, session_store, memory_store):
        await memory_store.put_object(CANONICAL_KEY, b"{not json", "application/json")
        with pytest.raises(MalformedDocumentError):
            await session_store.load("u1", "s1")


class TestUpdate:
    """Tests for merge-and-rewrite."""

    @pytest.mark.asyncio
    async def test_empty_update_only_advances_updated_at(self, session_store):
        existing = (await session_store.create("u1", "s1")).session

        updated = await session_store.update("u1", "s1", SessionUpdate(), existing=existing)

        assert updated.updated_at > existing.updated_at
        before = existing.to_document()
        after = updated.to_document()
        before.pop("updatedAt")
        after.pop("updatedAt")
        assert after == before

    @pytest.mark.asyncio
    async def test_field_precedence(self, session_store):
        await session_store.create("u1", "s1", SessionOptions(title="keep me", tags=["a"], location="Berlin"))

        updated = await session_store.update("u1", "s1", SessionUpdate(
            audio=AudioInfoUpdate(chunk_count=5, duration=0),
            metadata=SessionDetailsUpdate(title="", tags=[], location="Paris", description=None),
        ))

        assert updated.audio.chunk_count == 5
        assert updated.audio.duration == 0
        assert updated.audio.chunk_duration == 5
        assert updated.metadata.title == "keep me"
        assert updated.metadata.tags == ["a"]
        assert updated.metadata.location == "Paris"

    @pytest.mark.asyncio
    async def test_other_groups_merge(self, session_store):
        await session_store.create("u1", "s1")
        updated = await session_store.update("u1", "s1", SessionUpdate(
            status="completed",
            transcription=TranscriptionProgressUpdate(status="processing", processed_chunks=2),
        ))

        assert updated.status == "completed"
        assert updated.transcription.status == "processing"
        assert updated.transcription.processed_chunks == 2
        assert updated.transcription.provider == "whisper"

    @pytest.mark.asyncio
    async def test_update_missing_session(self, session_store):
        with pytest.raises(NotFoundError):
            await session_store.update("u1", "nope", SessionUpdate())

    @pytest.mark.asyncio
    async def test_update_preserves_unknown_fields(self, session_store, memory_store):
        await memory_store.put_object(
            CANONICAL_KEY,
            json.dumps({"sessionId": "s1", "userId": "u1", "customFlag": True}).encode(),
            "application/json",
        )
        await session_store.update("u1", "s1", SessionUpdate(audio=AudioInfoUpdate(chunk_count=1)))

        stored = _document(memory_store, CANONICAL_KEY)
        assert stored["customFlag"] is True
        assert stored["audio"]["chunkCount"] == 1

    @pytest.mark.asyncio
    async def test_last_writer_wins(self, session_store):
        await session_store.create("u1", "s1")
        first = await session_store.load("u1", "s1")
        second = await session_store.load("u1", "s1")

        await session_store.update("u1", "s1", SessionUpdate(metadata=SessionDetailsUpdate(title="A")), existing=first)
        await session_store.update("u1", "s1", SessionUpdate(audio=AudioInfoUpdate(chunk_count=4)), existing=second)

        final = await session_store.load("u1", "s1")
        assert final.audio.chunk_count == 4
        assert final.metadata.title == ""


class TestUpsert:
    """Tests for create-or-update with flat client metadata."""

    @pytest.mark.asyncio
    async def test_creates_on_miss(self, session_store):
        fields = MetadataFields(chunk_duration=10, chunk_count=7, title="Standup", keywords=["sync"])
        result = await session_store.upsert("u1", "s1", fields, user_email="a@b.c")

        assert result.created
        assert result.session.audio.chunk_duration == 10
        assert result.session.audio.chunk_count == 0
        assert result.session.metadata.title == "Standup"
        assert result.session.metadata.keywords == ["sync"]
        assert result.session.user_email == "a@b.c"

    @pytest.mark.asyncio
    async def test_updates_on_hit(self, session_store):
        await session_store.create("u1", "s1", SessionOptions(title="Standup"))
        result = await session_store.upsert("u1", "s1", MetadataFields(chunk_count=5, summary="done"))

        assert not result.created
        assert result.source == LookupSource.CANONICAL
        assert result.session.audio.chunk_count == 5
        assert result.session.metadata.summary == "done"
        assert result.session.metadata.title == "Standup"

    @pytest.mark.asyncio
    async def test_falsy_flat_fields_keep_stored_values(self, session_store):
        await session_store.create("u1", "s1", SessionOptions(title="Standup"))
        await session_store.upsert("u1", "s1", MetadataFields(chunk_count=5, duration=25.0))

        result = await session_store.upsert("u1", "s1", MetadataFields(chunk_count=0, duration=0, title="x"))

        assert result.session.audio.chunk_count == 5
        assert result.session.audio.duration == 25.0
        assert result.session.metadata.title == "x"

    @pytest.mark.asyncio
    async def test_legacy_session_moves_to_canonical(self, session_store, memory_store):
        legacy_key = "users/u1/audio/sessions/2026-10-18-s1/metadata.json"
        await memory_store.put_object(legacy_key, b'{"sessionId": "s1", "userId": "u1"}', "application/json")

        result = await session_store.upsert("u1", "s1", MetadataFields(chunk_count=2))

        assert result.source == LookupSource.LEGACY
        assert _document(memory_store, CANONICAL_KEY)["audio"]["chunkCount"] == 2
        assert (await session_store.resolve("u1", "s1")).source == LookupSource.CANONICAL


class TestListSessions:

    @pytest.mark.asyncio
    async def test_newest_first_with_unresolved_folders(self, session_store, memory_store):
        await session_store.create("u1", "older")
        await session_store.create("u1", "newer")
        await memory_store.put_object(
            "users/u1/audio/sessions/2024-01-15-legacy/metadata.json", b"{}", "application/json"
        )

        sessions = await session_store.list_sessions("u1")

        assert [s.folder for s in sessions] == ["newer", "older", "2024-01-15-legacy"]
        assert sessions[0].metadata.session_id == "newer"
        assert sessions[2].metadata is None
        assert sessions[2].session_id == "2024-01-15-legacy"

    @pytest.mark.asyncio
    async def test_unreadable_folder_listed_without_metadata(self, session_store, memory_store):
        await session_store.create("u1", "good")
        await memory_store.put_object("users/u1/audio/sessions/bad/session.json", b"{bad", "application/json")

        sessions = await session_store.list_sessions("u1")

        by_folder = {s.folder: s for s in sessions}
        assert set(by_folder) == {"good", "bad"}
        assert by_folder["good"].metadata.session_id == "good"
        assert by_folder["bad"].metadata is None

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, clock):
        class BrokenStore(MemoryStorage):
            async def get_object(self, key):
                raise StoreError("connection reset")

        store = BrokenStore()
        await store.put_object("users/u1/audio/sessions/s1/session.json", b"{}", "application/json")
        with pytest.raises(StoreError):
            await SessionMetadataStore(store, clock=clock).list_sessions("u1")

    @pytest.mark.asyncio
    async def test_drains_pagination(self, clock):
        store = MemoryStorage(page_size=1)
        sessions = SessionMetadataStore(store, clock=clock)
        for index in range(4):
            await sessions.create("u1", f"s{index}")

        assert len(await sessions.list_sessions("u1")) == 4

    @pytest.mark.asyncio
    async def test_no_sessions(self, session_store):
        assert await session_store.list_sessions("u1") == []
