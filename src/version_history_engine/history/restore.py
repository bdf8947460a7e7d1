"""Restore a document to a past Version.

Restore never edits or removes existing Versions. It reconstructs the
target state and writes it through the normal live-document write path,
which appends one new Version tagged with restore_version_id. That Version
is diffed against the live document as it is at write time, which may
already differ from the state the reconstruction started from.

The two steps are not atomic. If the live document is deleted in between,
the restore fails with ConflictError instead of recreating it.
"""

from __future__ import annotations

from version_history_engine.core.models import Version
from version_history_engine.errors import ConflictError, NotFoundError
from version_history_engine.history.live_document import LiveDocumentWriter
from version_history_engine.history.reconstructor import Reconstructor
from version_history_engine.observability import get_logger

logger = get_logger(__name__)


class RestoreOrchestrator:
    """Writes reconstructed historical states back as the live document.

    Args:
        reconstructor: Produces the target historical state.
        writer: The live-document write path.
    """

    def __init__(self, reconstructor: Reconstructor, writer: LiveDocumentWriter) -> None:
        self._reconstructor = reconstructor
        self._writer = writer

    async def restore(
        self,
        document_id: str,
        target_version_id: str,
        acting_user_id: str,
        acting_user_name: str = "Unknown",
    ) -> Version | None:
        """Restore document_id to its state right after target_version_id.

        Args:
            document_id: The document to restore.
            target_version_id: The Version to restore to.
            acting_user_id: Recorded as the author of the restore Version.
            acting_user_name: Display name recorded on the restore Version.

        Returns:
            The new forward Version, or None when the live document already
            equals the target state.

        Raises:
            NotFoundError: If the live document does not exist at the start.
            VersionNotFoundError: If the target is not in the log.
            ConflictError: If the live document was deleted mid-restore.
        """
        target_state = await self._reconstructor.reconstruct_at(document_id, target_version_id)

        try:
            version = await self._writer.replace_live_document(
                document_id,
                target_state,
                author_id=acting_user_id,
                author_name=acting_user_name,
                restore_version_id=target_version_id,
            )
        except NotFoundError as exc:
            logger.warning(
                "Live document deleted during restore",
                document_id=document_id,
                target_version_id=target_version_id,
            )
            raise ConflictError(
                f"Document {document_id} was deleted while restoring version {target_version_id}"
            ) from exc

        if version is None:
            logger.info(
                "Restore was a no-op, live document already matches target",
                document_id=document_id,
                target_version_id=target_version_id,
            )
        else:
            logger.info(
                "Document restored",
                document_id=document_id,
                target_version_id=target_version_id,
                new_version_id=version.version_id,
                acting_user_id=acting_user_id,
            )
        return version
