"""Tests for restoring documents to past versions.

Tests verify:
- Restore appends exactly one forward Version and rewrites nothing
- The restore Version is tagged with restore_version_id and the acting user
- Restoring to the current state is a no-op
- Concurrent edits and deletes between reconstruction and write
"""

from __future__ import annotations

from typing import Any

import pytest

from version_history_engine.adapters.memory_store import InMemoryDocumentStore, InMemoryVersionStore
from version_history_engine.core.models import Document, Version
from version_history_engine.errors import ConflictError, NotFoundError, VersionNotFoundError
from version_history_engine.history.diff import compute_diff
from version_history_engine.history.engine import VersionHistoryEngine


async def create_example(engine: VersionHistoryEngine, document_id: str) -> list[Version]:
    """Create {title: A, tags: []} and apply title B, tags [x], title C."""
    await engine.writer.create_document(document_id, {"title": "A", "tags": []})
    versions = []
    for patch_fields in ({"title": "B"}, {"tags": ["x"]}, {"title": "C"}):
        version = await engine.writer.update_fields(document_id, patch_fields, author_id="user-1")
        assert version is not None
        versions.append(version)
    return versions


def dump_all(versions: list[Version]) -> list[dict[str, Any]]:
    """Serialize versions for byte-for-byte comparison."""
    return [version.model_dump(mode="json") for version in versions]


class TestRestore:
    """Tests for RestoreOrchestrator.restore() via the engine."""

    @pytest.mark.asyncio()
    async def test_restore_produces_forward_history(
        self,
        engine: VersionHistoryEngine,
        document_store: InMemoryDocumentStore,
        version_store: InMemoryVersionStore,
        document_id: str,
    ) -> None:
        v1, _, _ = await create_example(engine, document_id)
        history_before = dump_all(await engine.log.history(document_id))
        live_before = await document_store.get(document_id)

        restored = await engine.restore(document_id, v1.version_id, acting_user_id="user-2", acting_user_name="Grace")

        assert restored is not None
        assert version_store.count(document_id) == 4
        assert await document_store.get(document_id) == {"title": "B", "tags": []}
        assert dump_all((await engine.log.history(document_id))[1:]) == history_before
        assert restored.sequence == 4
        assert restored.restore_version_id == v1.version_id
        assert restored.is_restore
        assert restored.author_id == "user-2"
        assert restored.author_name == "Grace"
        assert restored.changes == compute_diff(live_before, {"title": "B", "tags": []})

    @pytest.mark.asyncio()
    async def test_restore_removes_fields_introduced_later(
        self,
        engine: VersionHistoryEngine,
        document_store: InMemoryDocumentStore,
        document_id: str,
    ) -> None:
        await engine.writer.create_document(document_id, {"title": "A"})
        v1 = await engine.writer.update_fields(document_id, {"title": "B"}, author_id="user-1")
        await engine.writer.update_fields(document_id, {"tags": ["x"]}, author_id="user-1")
        await engine.writer.update_fields(document_id, {"title": "C"}, author_id="user-1")
        assert v1 is not None

        restored = await engine.restore(document_id, v1.version_id, acting_user_id="user-2")

        assert await document_store.get(document_id) == {"title": "B"}
        assert restored is not None
        assert not restored.changes["tags"].has_after

    @pytest.mark.asyncio()
    async def test_restored_version_reconstructs_to_target(
        self, engine: VersionHistoryEngine, document_id: str
    ) -> None:
        v1, v2, _ = await create_example(engine, document_id)

        restored = await engine.restore(document_id, v1.version_id, acting_user_id="user-2")
        assert restored is not None

        assert await engine.reconstruct_at(document_id, restored.version_id) == {"title": "B", "tags": []}
        # Earlier versions still reconstruct through the restore entry.
        assert await engine.reconstruct_at(document_id, v2.version_id) == {"title": "B", "tags": ["x"]}

    @pytest.mark.asyncio()
    async def test_restore_to_newest_is_a_no_op(
        self,
        engine: VersionHistoryEngine,
        version_store: InMemoryVersionStore,
        document_id: str,
    ) -> None:
        _, _, v3 = await create_example(engine, document_id)

        assert await engine.restore(document_id, v3.version_id, acting_user_id="user-2") is None
        assert version_store.count(document_id) == 3

    @pytest.mark.asyncio()
    async def test_restore_unknown_version(self, engine: VersionHistoryEngine, document_id: str) -> None:
        await create_example(engine, document_id)

        with pytest.raises(VersionNotFoundError):
            await engine.restore(document_id, "missing-version", acting_user_id="user-2")

    @pytest.mark.asyncio()
    async def test_restore_missing_document(self, engine: VersionHistoryEngine) -> None:
        with pytest.raises(NotFoundError):
            await engine.restore("missing", "missing-version", acting_user_id="user-2")


class TestRestoreRaces:
    """Writes that land between reconstruction and the restore write."""

    @pytest.mark.asyncio()
    async def test_delete_between_steps_raises_conflict(
        self,
        engine: VersionHistoryEngine,
        document_store: InMemoryDocumentStore,
        version_store: InMemoryVersionStore,
        document_id: str,
    ) -> None:
        v1, _, _ = await create_example(engine, document_id)
        original = engine.reconstructor.reconstruct_at

        async def reconstruct_then_delete(doc_id: str, version_id: str) -> Document:
            state = await original(doc_id, version_id)
            await document_store.delete(doc_id)
            return state

        engine.reconstructor.reconstruct_at = reconstruct_then_delete  # type: ignore[method-assign]

        with pytest.raises(ConflictError):
            await engine.restore(document_id, v1.version_id, acting_user_id="user-2")

        assert not await document_store.exists(document_id)
        assert version_store.count(document_id) == 3

    @pytest.mark.asyncio()
    async def test_concurrent_edit_is_diffed_against_current_live(
        self,
        engine: VersionHistoryEngine,
        document_store: InMemoryDocumentStore,
        document_id: str,
    ) -> None:
        v1, _, _ = await create_example(engine, document_id)
        original = engine.reconstructor.reconstruct_at

        async def reconstruct_then_edit(doc_id: str, version_id: str) -> Document:
            state = await original(doc_id, version_id)
            await engine.writer.update_fields(doc_id, {"icon": "star"}, author_id="user-3")
            return state

        engine.reconstructor.reconstruct_at = reconstruct_then_edit  # type: ignore[method-assign]

        restored = await engine.restore(document_id, v1.version_id, acting_user_id="user-2")

        assert restored is not None
        assert restored.sequence == 5
        assert not restored.changes["icon"].has_after
        assert restored.changes["icon"].before == "star"
        assert await document_store.get(document_id) == {"title": "B", "tags": []}
