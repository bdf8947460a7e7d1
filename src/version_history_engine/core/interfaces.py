"""Abstract interfaces (Protocol classes) for the version history engine.

Defines the contracts between the history layer and the storage adapters
using Python's typing.Protocol. The history components depend on these
protocols, never on concrete adapter implementations, so the in-memory
and SQL stores are interchangeable and tests can pass mocks.

Protocols defined:
- IDocumentStore - read/replace of the single live document per ID
- IVersionStore  - append-only, ordered per-document version log
"""

from __future__ import annotations

from typing import Protocol

from version_history_engine.core.models import ChangeSet, Document, Version


class IDocumentStore(Protocol):
    """Store contract for live documents."""

    async def get(self, document_id: str) -> Document:
        """Return a private copy of the live document.

        Args:
            document_id: The document identifier.

        Returns:
            The document fields. Mutating the result does not affect the store.

        Raises:
            NotFoundError: If no live document exists with that ID.
        """
        ...

    async def exists(self, document_id: str) -> bool:
        """Return whether a live document exists with that ID."""
        ...

    async def create(self, document_id: str, fields: Document) -> None:
        """Create a new live document.

        Raises:
            ConflictError: If a document with that ID already exists.
        """
        ...

    async def replace(self, document_id: str, fields: Document) -> None:
        """Replace the live document wholesale.

        Raises:
            NotFoundError: If the document no longer exists. The store never
                recreates a deleted document through replace.
        """
        ...

    async def delete(self, document_id: str) -> None:
        """Delete the live document. The version log is left intact.

        Raises:
            NotFoundError: If no live document exists with that ID.
        """
        ...


class IVersionStore(Protocol):
    """Store contract for the append-only version log.

    Implementations expose no update or delete operations.
    """

    async def append(
        self,
        document_id: str,
        changes: ChangeSet,
        author_id: str,
        author_name: str,
        restore_version_id: str | None = None,
    ) -> Version:
        """Persist a new Version with server-assigned id, timestamp and sequence.

        The assigned timestamp and sequence are strictly greater than those
        of every Version already stored for the document.

        Args:
            document_id: The document the version belongs to.
            changes: Non-empty ChangeSet.
            author_id: Identifier of the writing user.
            author_name: Display name captured at write time.
            restore_version_id: Set when the write is a restore.

        Returns:
            The stored Version. Implementations hand out copies, so
            mutating a returned Version never alters the stored log.

        Raises:
            ValidationError: If changes is empty. Nothing is written.
        """
        ...

    async def list_versions(self, document_id: str, limit: int | None = None) -> list[Version]:
        """Return versions newest-first.

        Args:
            document_id: The document whose log to read.
            limit: Maximum number of versions. None reads the entire log.

        Returns:
            Versions ordered by sequence descending.
        """
        ...

    async def get_version(self, document_id: str, version_id: str) -> Version | None:
        """Return one version of a document, or None if absent."""
        ...
