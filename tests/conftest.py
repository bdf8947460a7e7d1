"""Test fixtures for the version history engine.

Provides:
- document_store: An empty InMemoryDocumentStore
- version_store: An empty InMemoryVersionStore
- engine: A VersionHistoryEngine wired to both stores
- document_id: A fixed document identifier
"""

import pytest

from version_history_engine.adapters.memory_store import InMemoryDocumentStore, InMemoryVersionStore
from version_history_engine.history.engine import VersionHistoryEngine


@pytest.fixture()
def document_id() -> str:
    """Return a fixed document identifier for consistent test assertions."""
    return "page-1"


@pytest.fixture()
def document_store() -> InMemoryDocumentStore:
    """Create an empty live document store."""
    return InMemoryDocumentStore()


@pytest.fixture()
def version_store() -> InMemoryVersionStore:
    """Create an empty version store."""
    return InMemoryVersionStore()


@pytest.fixture()
def engine(
    document_store: InMemoryDocumentStore,
    version_store: InMemoryVersionStore,
) -> VersionHistoryEngine:
    """Create an engine over the in-memory stores.

    Args:
        document_store: Injected live document store fixture.
        version_store: Injected version store fixture.

    Returns:
        A VersionHistoryEngine with default list caps.
    """
    return VersionHistoryEngine(document_store, version_store)
