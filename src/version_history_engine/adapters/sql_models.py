"""SQLAlchemy ORM models for the SQL storage backend.

All tables use the `vh_` prefix.

Models:
- DocumentRecord - the single live document per ID
- VersionRecord  - append-only version log entries

VersionRecord rows are written ONLY via SqlVersionStore.append(). The
(document_id, sequence) unique constraint is what orders the log; two
writers racing to append the same sequence cannot both commit.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base for version history tables."""


class DocumentRecord(Base):
    """Live document row.

    Attributes:
        id: Stable document identifier.
        fields: The document's named fields as a JSON object.
        created_at: When the live document was first written.
        updated_at: When the live document was last replaced.
    """

    __tablename__ = "vh_documents"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    fields: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
        comment="Document fields: {field_name: json_value}",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class VersionRecord(Base):
    """Immutable version log row.

    Attributes:
        id: UUID v4 string version identifier.
        document_id: Owning document identifier. Not a foreign key: history
            outlives deletion of the live document.
        sequence: Per-document counter starting at 1.
        author_id: Identifier of the writing user.
        author_name: Author display name captured at write time.
        created_at: Server-assigned creation timestamp.
        changes: Serialized ChangeSet, absent sides omitted.
        is_snapshot: Reserved for full-state snapshots. Always False.
        restore_version_id: Version restored by this entry, if any.
    """

    __tablename__ = "vh_document_versions"
    __table_args__ = (
        UniqueConstraint("document_id", "sequence", name="uq_vh_document_versions_document_sequence"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    document_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[str] = mapped_column(String(255), nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False, default="Unknown")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    changes: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        comment="ChangeSet: {field: {before?, after?}}",
    )
    is_snapshot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    restore_version_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
