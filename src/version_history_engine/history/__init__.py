"""Document version history - diffing, append-only log, reconstruction, restore.

Records every edit to a live document as a field-level ChangeSet in an
append-only per-document log, reconstructs the document as of any past
Version by replaying the log backward from the live state, and restores
past states as new forward Versions.
"""

from __future__ import annotations

from version_history_engine.history.diff import apply_changes, compute_diff, revert_changes
from version_history_engine.history.engine import VersionHistoryEngine
from version_history_engine.history.live_document import LiveDocumentWriter
from version_history_engine.history.reconstructor import Reconstructor
from version_history_engine.history.restore import RestoreOrchestrator
from version_history_engine.history.version_log import VersionLog

__all__ = [
    "LiveDocumentWriter",
    "Reconstructor",
    "RestoreOrchestrator",
    "VersionHistoryEngine",
    "VersionLog",
    "apply_changes",
    "compute_diff",
    "revert_changes",
]
