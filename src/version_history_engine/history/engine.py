"""Per-request facade over the version history components.

VersionHistoryEngine wires the Version Log, Reconstructor, Restore
Orchestrator and live-document writer around one pair of stores. It holds
no state of its own; build one per request (or per unit of work) from the
stores that request should use.
"""

from __future__ import annotations

from version_history_engine.core.interfaces import IDocumentStore, IVersionStore
from version_history_engine.core.models import ChangeSet, Document, Version
from version_history_engine.history.live_document import LiveDocumentWriter
from version_history_engine.history.reconstructor import Reconstructor
from version_history_engine.history.restore import RestoreOrchestrator
from version_history_engine.history.version_log import (
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    VersionLog,
)
from version_history_engine.settings import Settings


class VersionHistoryEngine:
    """Operations the engine offers to UI and API layers.

    Args:
        documents: The live document store.
        versions: The version store.
        default_limit: Default cap for list_versions.
        max_limit: Upper bound for caller-supplied list limits.
    """

    def __init__(
        self,
        documents: IDocumentStore,
        versions: IVersionStore,
        default_limit: int = DEFAULT_LIST_LIMIT,
        max_limit: int = MAX_LIST_LIMIT,
    ) -> None:
        self.log = VersionLog(versions, default_limit=default_limit, max_limit=max_limit)
        self.writer = LiveDocumentWriter(documents, self.log)
        self.reconstructor = Reconstructor(documents, self.log)
        self.restorer = RestoreOrchestrator(self.reconstructor, self.writer)

    @classmethod
    def from_settings(
        cls,
        documents: IDocumentStore,
        versions: IVersionStore,
        settings: Settings,
    ) -> VersionHistoryEngine:
        """Build an engine using the list caps from settings."""
        return cls(
            documents,
            versions,
            default_limit=settings.version_list_limit,
            max_limit=settings.version_list_max_limit,
        )

    async def list_versions(self, document_id: str, limit: int | None = None) -> list[Version]:
        return await self.log.list(document_id, limit=limit)

    async def get_version(self, document_id: str, version_id: str) -> Version:
        return await self.log.get(document_id, version_id)

    async def reconstruct_at(self, document_id: str, version_id: str) -> Document:
        return await self.reconstructor.reconstruct_at(document_id, version_id)

    async def compare_versions(
        self,
        document_id: str,
        from_version_id: str,
        to_version_id: str,
    ) -> ChangeSet:
        return await self.reconstructor.compare(document_id, from_version_id, to_version_id)

    async def restore(
        self,
        document_id: str,
        version_id: str,
        acting_user_id: str,
        acting_user_name: str = "Unknown",
    ) -> Version | None:
        return await self.restorer.restore(
            document_id,
            version_id,
            acting_user_id=acting_user_id,
            acting_user_name=acting_user_name,
        )
