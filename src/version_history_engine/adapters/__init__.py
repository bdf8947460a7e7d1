"""Storage adapters implementing the protocols in core/interfaces.py."""

from __future__ import annotations

from version_history_engine.adapters.memory_store import InMemoryDocumentStore, InMemoryVersionStore

__all__ = ["InMemoryDocumentStore", "InMemoryVersionStore"]
