"""The live-document write path.

Every mutation of a live document, organic edit or restore alike, goes
through LiveDocumentWriter.replace_live_document: read the current state,
write the new state, diff the two, and append a Version when anything
changed.

There is no lock or concurrency token. When two writers race, the last
replace wins, and each appended Version describes the before/after pair its
own writer observed.
"""

from __future__ import annotations

from typing import Any

from version_history_engine.core.interfaces import IDocumentStore
from version_history_engine.core.models import Document, Version
from version_history_engine.history.diff import compute_diff
from version_history_engine.history.version_log import VersionLog
from version_history_engine.observability import get_logger

logger = get_logger(__name__)


class LiveDocumentWriter:
    """Mutation path for live documents that records history as a side effect.

    Args:
        documents: The live document store.
        version_log: The version log that receives one Version per real change.
    """

    def __init__(self, documents: IDocumentStore, version_log: VersionLog) -> None:
        self._documents = documents
        self._log = version_log

    async def create_document(self, document_id: str, fields: Document) -> None:
        """Create a live document. No Version is written for creation.

        Raises:
            ConflictError: If the document already exists.
        """
        await self._documents.create(document_id, fields)
        logger.info("Document created", document_id=document_id, fields=sorted(fields))

    async def replace_live_document(
        self,
        document_id: str,
        new_state: Document,
        author_id: str,
        author_name: str = "Unknown",
        restore_version_id: str | None = None,
    ) -> Version | None:
        """Replace the live document and record the change.

        Args:
            document_id: The document to replace.
            new_state: The complete new field set.
            author_id: Identifier of the writing user.
            author_name: Display name captured on the Version.
            restore_version_id: Set by restores to tag the resulting Version.

        Returns:
            The appended Version, or None when new_state equals the live
            document (the write still happens and is harmless).

        Raises:
            NotFoundError: If the document does not exist or was deleted
                before the replace landed.
        """
        current = await self._documents.get(document_id)
        changes = compute_diff(current, new_state)
        await self._documents.replace(document_id, new_state)
        return await self._log.append(
            document_id=document_id,
            changes=changes,
            author_id=author_id,
            author_name=author_name,
            restore_version_id=restore_version_id,
        )

    async def update_fields(
        self,
        document_id: str,
        patch: dict[str, Any],
        author_id: str,
        author_name: str = "Unknown",
    ) -> Version | None:
        """Shallow-merge patch into the live document's top-level fields.

        Args:
            document_id: The document to edit.
            patch: Fields to set. Values replace whole field values.
            author_id: Identifier of the writing user.
            author_name: Display name captured on the Version.

        Returns:
            The appended Version, or None when nothing changed.
        """
        current = await self._documents.get(document_id)
        return await self.replace_live_document(
            document_id,
            {**current, **patch},
            author_id=author_id,
            author_name=author_name,
        )

    async def delete_document(self, document_id: str) -> None:
        """Delete the live document. Its version log is kept.

        Raises:
            NotFoundError: If the document does not exist.
        """
        await self._documents.delete(document_id)
        logger.info("Document deleted", document_id=document_id)
