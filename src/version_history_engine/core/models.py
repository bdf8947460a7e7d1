"""Version history domain models.

A Version is the immutable record of one edit to a live document. It carries
a ChangeSet (field name -> FieldChange) describing only the fields whose
values differ between the document before and after the edit.

A FieldChange side may be absent: the field did not exist on that side of
the edit. Absence is tracked through pydantic's ``model_fields_set`` and is
distinct from JSON null. Absent sides are omitted when serialized, so
``{"after": ["x"]}`` reads as "field introduced with value ['x']".
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

Document = dict[str, Any]
"""A live document: an unordered bag of JSON-serializable named fields."""


class FieldChange(BaseModel):
    """Before/after pair for one changed field.

    Attributes:
        before: Value prior to the edit. Unset when the field did not exist.
        after: Value after the edit. Unset when the field was removed.
    """

    model_config = ConfigDict(frozen=True)

    before: Any = Field(default=None, description="Value before the edit (omitted if absent)")
    after: Any = Field(default=None, description="Value after the edit (omitted if absent)")

    @property
    def had_before(self) -> bool:
        """Whether the field existed before the edit."""
        return "before" in self.model_fields_set

    @property
    def has_after(self) -> bool:
        """Whether the field exists after the edit."""
        return "after" in self.model_fields_set

    def to_json(self) -> dict[str, Any]:
        """Serialize, omitting absent sides."""
        return self.model_dump(mode="json", exclude_unset=True)


ChangeSet = dict[str, FieldChange]
"""Field name -> FieldChange. Never empty when attached to a Version."""


def changes_to_json(changes: ChangeSet) -> dict[str, dict[str, Any]]:
    """Serialize a ChangeSet to plain JSON-compatible dicts.

    Args:
        changes: The ChangeSet to serialize.

    Returns:
        ``{field: {"before": ..., "after": ...}}`` with absent sides omitted.
    """
    return {field: change.to_json() for field, change in changes.items()}


def changes_from_json(raw: dict[str, dict[str, Any]]) -> ChangeSet:
    """Parse a ChangeSet stored by ``changes_to_json``.

    Args:
        raw: Serialized change-set mapping.

    Returns:
        The ChangeSet with absent sides preserved as unset.
    """
    return {field: FieldChange.model_validate(change) for field, change in raw.items()}


class Version(BaseModel):
    """Immutable, append-only log entry for one document edit.

    Attributes:
        version_id: UUID v4 string - unique version identifier.
        document_id: Identifier of the document this version belongs to.
        author_id: Identifier of the user whose write produced the version.
        author_name: Author display name captured at write time.
        created_at: Server-assigned timestamp, strictly increasing per document.
        sequence: Per-document counter starting at 1. Orders the log.
        changes: The non-empty ChangeSet recorded by this version.
        is_snapshot: Reserved for full-state snapshots. Always False.
        restore_version_id: Target version when this version was produced
            by a restore rather than an organic edit.
    """

    model_config = ConfigDict(frozen=True)

    version_id: str = Field(..., description="UUID v4 string - unique version identifier")
    document_id: str = Field(..., description="Owning document identifier")
    author_id: str = Field(..., description="Identifier of the writing user")
    author_name: str = Field(default="Unknown", description="Author display name at write time")
    created_at: datetime = Field(..., description="Server-assigned creation timestamp (UTC)")
    sequence: int = Field(..., ge=1, description="Per-document monotonically increasing counter")
    changes: ChangeSet = Field(..., min_length=1, description="Field-level before/after diff")
    is_snapshot: bool = Field(default=False, description="Reserved for full-state snapshots")
    restore_version_id: str | None = Field(
        default=None,
        description="Version restored by this entry, if it was produced by a restore",
    )

    @field_serializer("changes")
    def _serialize_changes(self, changes: ChangeSet) -> dict[str, dict[str, Any]]:
        return changes_to_json(changes)

    @property
    def is_restore(self) -> bool:
        """Whether this version was written by a restore."""
        return self.restore_version_id is not None
