"""Domain models and storage protocols for the version history engine."""

from __future__ import annotations

from version_history_engine.core.interfaces import IDocumentStore, IVersionStore
from version_history_engine.core.models import ChangeSet, Document, FieldChange, Version

__all__ = [
    "ChangeSet",
    "Document",
    "FieldChange",
    "IDocumentStore",
    "IVersionStore",
    "Version",
]
