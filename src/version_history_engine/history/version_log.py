"""Append-only per-document version log.

Wraps an IVersionStore with the log's rules:
- empty ChangeSets are a no-op, never a Version
- UI-facing listings are capped; reconstruction reads the full history
- version lookups that miss raise VersionNotFoundError
"""

from __future__ import annotations

from version_history_engine.core.interfaces import IVersionStore
from version_history_engine.core.models import ChangeSet, Version
from version_history_engine.errors import ValidationError, VersionNotFoundError
from version_history_engine.observability import get_logger

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200


class VersionLog:
    """The ordered, append-only history of every document.

    Args:
        store: The version store to read from and append to.
        default_limit: Number of versions ``list`` returns when no limit is given.
        max_limit: Upper bound that caller-supplied limits are clamped to.
    """

    def __init__(
        self,
        store: IVersionStore,
        default_limit: int = DEFAULT_LIST_LIMIT,
        max_limit: int = MAX_LIST_LIMIT,
    ) -> None:
        self._store = store
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def append(
        self,
        document_id: str,
        changes: ChangeSet,
        author_id: str,
        author_name: str = "Unknown",
        restore_version_id: str | None = None,
    ) -> Version | None:
        """Append a Version recording changes, unless there are none.

        Args:
            document_id: The edited document.
            changes: ChangeSet produced by compute_diff.
            author_id: Identifier of the writing user.
            author_name: Display name captured at write time.
            restore_version_id: Target version when the write is a restore.

        Returns:
            The stored Version, or None when changes is empty.
        """
        if not changes:
            logger.debug("Empty change set, no version written", document_id=document_id)
            return None

        version = await self._store.append(
            document_id=document_id,
            changes=changes,
            author_id=author_id,
            author_name=author_name,
            restore_version_id=restore_version_id,
        )
        logger.info(
            "Version appended",
            document_id=document_id,
            version_id=version.version_id,
            sequence=version.sequence,
            fields=sorted(changes),
            restore_version_id=restore_version_id,
        )
        return version

    async def list(self, document_id: str, limit: int | None = None) -> list[Version]:
        """Return the most recent versions, newest-first.

        Args:
            document_id: The document whose log to read.
            limit: Maximum number of versions. Defaults to the configured
                default and is clamped to the configured maximum.

        Returns:
            At most ``limit`` versions ordered newest-first.

        Raises:
            ValidationError: If limit is less than 1.
        """
        if limit is None:
            limit = self._default_limit
        if limit < 1:
            raise ValidationError(f"limit must be at least 1, got {limit}")
        return await self._store.list_versions(document_id, limit=min(limit, self._max_limit))

    async def history(self, document_id: str) -> list[Version]:
        """Return the complete, uncapped log newest-first."""
        return await self._store.list_versions(document_id, limit=None)

    async def get(self, document_id: str, version_id: str) -> Version:
        """Return one version.

        Raises:
            VersionNotFoundError: If the version is not in the document's log.
        """
        version = await self._store.get_version(document_id, version_id)
        if version is None:
            raise VersionNotFoundError(document_id, version_id)
        return version
