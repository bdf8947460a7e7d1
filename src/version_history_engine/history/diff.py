"""Field-level structural diffing of document snapshots.

Two field values are equal when their canonical JSON serializations are
equal (sorted keys, compact separators), so nested objects and arrays are
compared by value and dict key order never produces a spurious change.
A field present on one side only is always a change.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from version_history_engine.core.models import ChangeSet, Document, FieldChange


def _canonical(value: Any) -> str:
    """Serialize a field value to its canonical JSON form.

    Args:
        value: Any JSON-serializable value. Non-JSON scalars (datetimes,
            UUIDs) fall back to ``str``.

    Returns:
        Compact, key-sorted JSON text.
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def compute_diff(old_doc: Document, new_doc: Document) -> ChangeSet:
    """Compute the ChangeSet that turns old_doc into new_doc.

    Pure function: neither input is mutated and the returned FieldChange
    values are deep copies.

    Args:
        old_doc: Document snapshot before the edit.
        new_doc: Document snapshot after the edit.

    Returns:
        A ChangeSet keyed by field name in sorted order. Empty when the
        snapshots are structurally equal, which callers treat as a no-op.
    """
    changes: ChangeSet = {}
    for field in sorted(old_doc.keys() | new_doc.keys()):
        in_old = field in old_doc
        in_new = field in new_doc
        if in_old and in_new and _canonical(old_doc[field]) == _canonical(new_doc[field]):
            continue

        sides: dict[str, Any] = {}
        if in_old:
            sides["before"] = copy.deepcopy(old_doc[field])
        if in_new:
            sides["after"] = copy.deepcopy(new_doc[field])
        changes[field] = FieldChange(**sides)
    return changes


def revert_changes(doc: Document, changes: ChangeSet) -> Document:
    """Return a copy of doc with every changed field set back to its before value.

    Fields whose before side is absent are removed.

    Args:
        doc: The document to revert from. Not mutated.
        changes: The ChangeSet to undo.

    Returns:
        A new document.
    """
    reverted = copy.deepcopy(doc)
    for field, change in changes.items():
        if change.had_before:
            reverted[field] = copy.deepcopy(change.before)
        else:
            reverted.pop(field, None)
    return reverted


def apply_changes(doc: Document, changes: ChangeSet) -> Document:
    """Return a copy of doc with every changed field set to its after value.

    Fields whose after side is absent are removed.

    Args:
        doc: The document to apply to. Not mutated.
        changes: The ChangeSet to replay forward.

    Returns:
        A new document.
    """
    applied = copy.deepcopy(doc)
    for field, change in changes.items():
        if change.has_after:
            applied[field] = copy.deepcopy(change.after)
        else:
            applied.pop(field, None)
    return applied
