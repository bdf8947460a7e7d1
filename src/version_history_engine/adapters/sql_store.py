"""SQLAlchemy stores for live documents and the version log.

Each store implements the corresponding protocol from core/interfaces.py
on top of a caller-owned AsyncSession. Stores flush but never commit; the
session owner (session_scope) commits the live-document replace and the
version append together.

Stores:
- SqlDocumentStore - DocumentRecord read/replace
- SqlVersionStore  - VersionRecord append-only log
"""

from __future__ import annotations

import copy
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from version_history_engine.adapters.database import store_errors
from version_history_engine.adapters.sql_models import DocumentRecord, VersionRecord
from version_history_engine.core.models import (
    ChangeSet,
    Document,
    Version,
    changes_from_json,
    changes_to_json,
)
from version_history_engine.errors import ConflictError, NotFoundError, ValidationError
from version_history_engine.observability import get_logger

logger = get_logger(__name__)


def _to_version(record: VersionRecord) -> Version:
    """Convert a VersionRecord row to the immutable domain model."""
    return Version(
        version_id=record.id,
        document_id=record.document_id,
        author_id=record.author_id,
        author_name=record.author_name,
        created_at=record.created_at,
        sequence=record.sequence,
        changes=changes_from_json(record.changes),
        is_snapshot=record.is_snapshot,
        restore_version_id=record.restore_version_id,
    )


class SqlDocumentStore:
    """Live document store on the primary database.

    Args:
        session: The async session owned by the current request.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _load(self, document_id: str) -> DocumentRecord:
        async with store_errors("get_document"):
            record = await self._session.get(DocumentRecord, document_id)
        if record is None:
            raise NotFoundError(document_id)
        return record

    async def get(self, document_id: str) -> Document:
        record = await self._load(document_id)
        return copy.deepcopy(record.fields)

    async def exists(self, document_id: str) -> bool:
        async with store_errors("exists_document"):
            record = await self._session.get(DocumentRecord, document_id)
        return record is not None

    async def create(self, document_id: str, fields: Document) -> None:
        if await self.exists(document_id):
            raise ConflictError(f"Document {document_id} already exists")
        async with store_errors("create_document"):
            self._session.add(DocumentRecord(id=document_id, fields=copy.deepcopy(fields)))
            await self._session.flush()
        logger.info("Live document created", document_id=document_id)

    async def replace(self, document_id: str, fields: Document) -> None:
        record = await self._load(document_id)
        # Assign a new object so the JSON column is marked dirty.
        record.fields = copy.deepcopy(fields)
        async with store_errors("replace_document"):
            await self._session.flush()

    async def delete(self, document_id: str) -> None:
        record = await self._load(document_id)
        async with store_errors("delete_document"):
            await self._session.delete(record)
            await self._session.flush()
        logger.info("Live document deleted", document_id=document_id)


class SqlVersionStore:
    """Append-only version store on the primary database.

    There is no update or delete method. Sequence numbers are max + 1 per
    document; the unique (document_id, sequence) constraint turns a lost
    race into ConflictError at flush time.

    Args:
        session: The async session owned by the current request.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

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
        async with store_errors("append_version"):
            stmt = select(func.max(VersionRecord.sequence)).where(
                VersionRecord.document_id == document_id,
            )
            result = await self._session.execute(stmt)
            next_sequence = (result.scalar() or 0) + 1

            record = VersionRecord(
                id=str(uuid.uuid4()),
                document_id=document_id,
                sequence=next_sequence,
                author_id=author_id,
                author_name=author_name,
                changes=changes_to_json(changes),
                is_snapshot=False,
                restore_version_id=restore_version_id,
            )
            self._session.add(record)
            await self._session.flush()
            # Load the server-assigned created_at.
            await self._session.refresh(record)

        return _to_version(record)

    async def list_versions(self, document_id: str, limit: int | None = None) -> list[Version]:
        stmt = (
            select(VersionRecord)
            .where(VersionRecord.document_id == document_id)
            .order_by(VersionRecord.sequence.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        async with store_errors("list_versions"):
            result = await self._session.execute(stmt)
            records = list(result.scalars().all())
        return [_to_version(record) for record in records]

    async def get_version(self, document_id: str, version_id: str) -> Version | None:
        stmt = select(VersionRecord).where(
            VersionRecord.document_id == document_id,
            VersionRecord.id == version_id,
        )
        async with store_errors("get_version"):
            result = await self._session.execute(stmt)
            record = result.scalar_one_or_none()
        return _to_version(record) if record is not None else None
