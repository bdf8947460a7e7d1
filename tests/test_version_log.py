"""Tests for the append-only version log and the in-memory stores.

Tests verify:
- Empty change sets never become Versions
- Sequence numbers and timestamps strictly increase per document
- Listing is newest-first and capped; history is uncapped
- The version store exposes no mutation beyond append()
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from version_history_engine.adapters.memory_store import InMemoryDocumentStore, InMemoryVersionStore
from version_history_engine.core.models import FieldChange
from version_history_engine.errors import ConflictError, NotFoundError, ValidationError, VersionNotFoundError
from version_history_engine.history.version_log import VersionLog


def title_change(before: str, after: str) -> dict[str, FieldChange]:
    """Build a one-field change set for tests."""
    return {"title": FieldChange(before=before, after=after)}


async def fill(log: VersionLog, document_id: str, count: int) -> None:
    """Append count successive title edits."""
    for index in range(count):
        await log.append(document_id, title_change(str(index), str(index + 1)), author_id="user-1")


class TestVersionStoreImmutability:
    """The version store is append-only."""

    def test_store_has_no_update_or_delete(self) -> None:
        store = InMemoryVersionStore()
        for name in ("update", "delete", "remove", "truncate", "replace"):
            assert not hasattr(store, name), f"InMemoryVersionStore must not have {name}()"


class TestAppend:
    """Tests for VersionLog.append()."""

    @pytest.mark.asyncio()
    async def test_empty_change_set_is_a_no_op(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store)

        result = await log.append("page-1", {}, author_id="user-1")

        assert result is None
        assert version_store.count("page-1") == 0

    @pytest.mark.asyncio()
    async def test_store_rejects_empty_change_set(self, version_store: InMemoryVersionStore) -> None:
        with pytest.raises(ValidationError):
            await version_store.append("page-1", {}, author_id="user-1", author_name="Ada")

        assert version_store.count("page-1") == 0

    @pytest.mark.asyncio()
    async def test_append_assigns_metadata(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store)

        version = await log.append("page-1", title_change("A", "B"), author_id="user-1", author_name="Ada")

        assert version is not None
        assert version.document_id == "page-1"
        assert version.author_id == "user-1"
        assert version.author_name == "Ada"
        assert version.sequence == 1
        assert version.is_snapshot is False
        assert version.restore_version_id is None
        assert version.created_at.tzinfo is not None

    @pytest.mark.asyncio()
    async def test_author_name_defaults_to_unknown(self, version_store: InMemoryVersionStore) -> None:
        version = await VersionLog(version_store).append("page-1", title_change("A", "B"), author_id="u")
        assert version is not None
        assert version.author_name == "Unknown"

    @pytest.mark.asyncio()
    async def test_sequence_and_timestamps_strictly_increase_with_stalled_clock(
        self, version_store: InMemoryVersionStore
    ) -> None:
        log = VersionLog(version_store)
        frozen = datetime(2026, 1, 1, tzinfo=timezone.utc)

        with patch("version_history_engine.adapters.memory_store.datetime") as mock_datetime:
            mock_datetime.now.return_value = frozen
            await fill(log, "page-1", 5)

        history = list(reversed(await log.history("page-1")))
        assert [v.sequence for v in history] == [1, 2, 3, 4, 5]
        timestamps = [v.created_at for v in history]
        assert all(earlier < later for earlier, later in zip(timestamps, timestamps[1:]))

    @pytest.mark.asyncio()
    async def test_sequences_are_per_document(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store)
        await fill(log, "page-1", 3)
        version = await log.append("page-2", title_change("A", "B"), author_id="user-1")

        assert version is not None
        assert version.sequence == 1
        assert version_store.count("page-1") == 3


class TestListing:
    """Tests for VersionLog.list() and history()."""

    @pytest.mark.asyncio()
    async def test_list_is_newest_first(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store)
        await fill(log, "page-1", 3)

        versions = await log.list("page-1")

        assert [v.sequence for v in versions] == [3, 2, 1]

    @pytest.mark.asyncio()
    async def test_list_defaults_to_fifty(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store)
        await fill(log, "page-1", 55)

        versions = await log.list("page-1")

        assert len(versions) == 50
        assert versions[0].sequence == 55
        assert len(await log.history("page-1")) == 55

    @pytest.mark.asyncio()
    async def test_explicit_limit_and_clamp(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store, default_limit=2, max_limit=4)
        await fill(log, "page-1", 6)

        assert len(await log.list("page-1")) == 2
        assert len(await log.list("page-1", limit=3)) == 3
        assert len(await log.list("page-1", limit=100)) == 4

    @pytest.mark.asyncio()
    async def test_limit_below_one_is_rejected(self, version_store: InMemoryVersionStore) -> None:
        with pytest.raises(ValidationError):
            await VersionLog(version_store).list("page-1", limit=0)

    @pytest.mark.asyncio()
    async def test_unknown_document_has_empty_log(self, version_store: InMemoryVersionStore) -> None:
        assert await VersionLog(version_store).list("missing") == []


class TestGet:
    """Tests for VersionLog.get()."""

    @pytest.mark.asyncio()
    async def test_get_returns_version(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store)
        appended = await log.append("page-1", title_change("A", "B"), author_id="user-1")
        assert appended is not None

        assert await log.get("page-1", appended.version_id) == appended

    @pytest.mark.asyncio()
    async def test_get_scoped_to_document(self, version_store: InMemoryVersionStore) -> None:
        log = VersionLog(version_store)
        appended = await log.append("page-1", title_change("A", "B"), author_id="user-1")
        assert appended is not None

        with pytest.raises(VersionNotFoundError):
            await log.get("page-2", appended.version_id)


class TestInMemoryDocumentStore:
    """Tests for the live document store."""

    @pytest.mark.asyncio()
    async def test_reads_are_isolated_copies(self, document_store: InMemoryDocumentStore) -> None:
        await document_store.create("page-1", {"tags": ["x"]})

        doc = await document_store.get("page-1")
        doc["tags"].append("y")

        assert await document_store.get("page-1") == {"tags": ["x"]}

    @pytest.mark.asyncio()
    async def test_create_twice_conflicts(self, document_store: InMemoryDocumentStore) -> None:
        await document_store.create("page-1", {})
        with pytest.raises(ConflictError):
            await document_store.create("page-1", {})

    @pytest.mark.asyncio()
    async def test_replace_never_recreates_deleted_document(
        self, document_store: InMemoryDocumentStore
    ) -> None:
        await document_store.create("page-1", {"title": "A"})
        await document_store.delete("page-1")

        with pytest.raises(NotFoundError):
            await document_store.replace("page-1", {"title": "B"})
        assert not await document_store.exists("page-1")
