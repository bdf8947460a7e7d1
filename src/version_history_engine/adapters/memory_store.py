"""In-memory document and version stores.

Stores live documents keyed by document_id and per-document version logs
ordered by sequence. The version store is append-only - no updates or
deletes are permitted - and hands out deep copies, so callers cannot edit
stored history in place.

Instances are process-local. They make tests hermetic without database
infrastructure and back the 'memory' storage backend. Every method is a
coroutine so callers suspend at each store call exactly as they would
against the SQL backend.
"""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timedelta, timezone

from version_history_engine.core.models import ChangeSet, Document, Version
from version_history_engine.errors import ConflictError, NotFoundError, ValidationError

_TICK = timedelta(microseconds=1)


class InMemoryDocumentStore:
    """Live document store backed by a dict.

    Documents are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    async def get(self, document_id: str) -> Document:
        if document_id not in self._documents:
            raise NotFoundError(document_id)
        return copy.deepcopy(self._documents[document_id])

    async def exists(self, document_id: str) -> bool:
        return document_id in self._documents

    async def create(self, document_id: str, fields: Document) -> None:
        if document_id in self._documents:
            raise ConflictError(f"Document {document_id} already exists")
        self._documents[document_id] = copy.deepcopy(fields)

    async def replace(self, document_id: str, fields: Document) -> None:
        if document_id not in self._documents:
            raise NotFoundError(document_id)
        self._documents[document_id] = copy.deepcopy(fields)

    async def delete(self, document_id: str) -> None:
        if self._documents.pop(document_id, None) is None:
            raise NotFoundError(document_id)


class InMemoryVersionStore:
    """Append-only version store.

    Maintains one list per document in sequence order. Sequence numbers
    start at 1. Timestamps come from the UTC clock but are clamped to be
    strictly greater than the previous version's, so a clock that stalls or
    steps backwards never breaks log ordering.
    """

    def __init__(self) -> None:
        # { document_id: list[Version] } sorted by sequence ascending
        self._versions: dict[str, list[Version]] = {}

    async def append(
        self,
        document_id: str,
        changes: ChangeSet,
        author_id: str,
        author_name: str,
        restore_version_id: str | None = None,
    ) -> Version:
        if not changes:
            raise ValidationError(f"Refusing to store an empty change set for document {document_id}")
        log = self._versions.setdefault(document_id, [])

        created_at = datetime.now(timezone.utc)
        if log and created_at <= log[-1].created_at:
            created_at = log[-1].created_at + _TICK

        version = Version(
            version_id=str(uuid.uuid4()),
            document_id=document_id,
            author_id=author_id,
            author_name=author_name,
            created_at=created_at,
            sequence=len(log) + 1,
            changes=copy.deepcopy(changes),
            is_snapshot=False,
            restore_version_id=restore_version_id,
        )
        log.append(version)
        return version.model_copy(deep=True)

    async def list_versions(self, document_id: str, limit: int | None = None) -> list[Version]:
        newest_first = list(reversed(self._versions.get(document_id, [])))
        if limit is not None:
            newest_first = newest_first[:limit]
        return [version.model_copy(deep=True) for version in newest_first]

    async def get_version(self, document_id: str, version_id: str) -> Version | None:
        for version in self._versions.get(document_id, []):
            if version.version_id == version_id:
                return version.model_copy(deep=True)
        return None

    def count(self, document_id: str) -> int:
        """Return the number of versions stored for a document."""
        return len(self._versions.get(document_id, []))
