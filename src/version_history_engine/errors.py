"""Error hierarchy for the version history engine.

Every failure the engine surfaces is a VersionHistoryError subclass carrying
a stable ``code`` string. UI and API layers switch on the code to show the
specific failure, since each kind has a different recovery action:

- NotFoundError          - the live document does not exist (reload / pick another)
- VersionNotFoundError   - the target version is not in the log (pick another version)
- ConflictError          - the live document changed underneath a write (reload and retry)
- StoreUnavailableError  - backing-store I/O failed (retry later)
- ValidationError        - caller supplied an invalid argument
"""

from __future__ import annotations


class VersionHistoryError(Exception):
    """Base class for all version history engine errors.

    Attributes:
        code: Stable machine-readable error code.
        message: Human-readable description.
    """

    code: str = "version_history_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(VersionHistoryError):
    """The live document does not exist."""

    code = "not_found"

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class VersionNotFoundError(VersionHistoryError):
    """The requested version is absent from the document's log."""

    code = "version_not_found"

    def __init__(self, document_id: str, version_id: str) -> None:
        super().__init__(f"Version {version_id} not found for document {document_id}")
        self.document_id = document_id
        self.version_id = version_id


class ConflictError(VersionHistoryError):
    """The live document was created, deleted, or appended to concurrently."""

    code = "conflict"


class StoreUnavailableError(VersionHistoryError):
    """The backing store failed. Not retried by the engine."""

    code = "store_unavailable"


class ValidationError(VersionHistoryError):
    """An argument passed to the engine is invalid."""

    code = "validation_error"
