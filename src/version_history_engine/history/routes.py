"""FastAPI routes for document version history.

The host application mounts ``router`` (usually under /api/v1) and calls
``register_exception_handlers`` so engine errors reach clients as distinct
status codes and error codes rather than a generic failure.

Routes:
    GET  /documents/{id}/versions                        - list recent versions
    GET  /documents/{id}/versions/compare                - diff two versions' states
    GET  /documents/{id}/versions/{version_id}           - one version
    GET  /documents/{id}/versions/{version_id}/document  - reconstructed document
    POST /documents/{id}/versions/{version_id}/restore   - restore to a version
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from version_history_engine.adapters.database import session_scope
from version_history_engine.adapters.sql_store import SqlDocumentStore, SqlVersionStore
from version_history_engine.core.models import Version, changes_to_json
from version_history_engine.errors import (
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
    VersionHistoryError,
    VersionNotFoundError,
)
from version_history_engine.history.engine import VersionHistoryEngine
from version_history_engine.observability import get_logger
from version_history_engine.settings import Settings

logger = get_logger(__name__)

router = APIRouter(prefix="/documents/{document_id}/versions", tags=["Version History"])


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


async def get_engine(request: Request) -> AsyncGenerator[VersionHistoryEngine, None]:
    """Build a VersionHistoryEngine for the current request.

    The memory backend reuses the stores kept on app.state. The SQL backend
    opens a session for the request so the live-document replace and the
    version append commit together.

    Yields:
        A request-scoped engine.
    """
    settings: Settings = request.app.state.settings
    if settings.storage_backend == "memory":
        yield VersionHistoryEngine.from_settings(
            request.app.state.document_store,
            request.app.state.version_store,
            settings,
        )
        return

    async with session_scope() as session:
        yield VersionHistoryEngine.from_settings(
            SqlDocumentStore(session),
            SqlVersionStore(session),
            settings,
        )


# Function scope: the SQL session commits before the response is sent.
EngineDep = Annotated[VersionHistoryEngine, Depends(get_engine, scope="function")]


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class VersionResponse(BaseModel):
    """A single version log entry.

    Attributes:
        version_id: The unique version identifier.
        document_id: The owning document.
        author_id: The writing user.
        author_name: Author display name captured at write time.
        created_at: Server-assigned creation timestamp.
        sequence: Position in the document's log, starting at 1.
        changes: ``{field: {before?, after?}}`` with absent sides omitted.
        is_snapshot: Reserved, always False.
        restore_version_id: Version restored by this entry, if any.
    """

    model_config = ConfigDict(frozen=True)

    version_id: str
    document_id: str
    author_id: str
    author_name: str
    created_at: datetime
    sequence: int
    changes: dict[str, dict[str, Any]]
    is_snapshot: bool
    restore_version_id: str | None = None

    @classmethod
    def from_version(cls, version: Version) -> VersionResponse:
        return cls.model_validate(version.model_dump(mode="json"))


class VersionListResponse(BaseModel):
    """Most recent versions of a document, newest-first."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    versions: list[VersionResponse]


class ReconstructResponse(BaseModel):
    """A document as it existed right after a version was written."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    version_id: str
    document: dict[str, Any] = Field(..., description="Reconstructed document fields")


class CompareResponse(BaseModel):
    """Field-level diff between the states after two versions."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    from_version_id: str
    to_version_id: str
    changes: dict[str, dict[str, Any]]


class RestoreRequest(BaseModel):
    """Request body for restoring a version."""

    model_config = ConfigDict(frozen=True)

    acting_user_id: str = Field(..., min_length=1, description="User performing the restore")
    acting_user_name: str = Field(default="Unknown", description="Display name recorded on the new version")


class RestoreResponse(BaseModel):
    """Outcome of a restore.

    Attributes:
        document_id: The restored document.
        restored_version_id: The version that was restored.
        version: The new forward version, or None when nothing changed.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    restored_version_id: str
    version: VersionResponse | None = None


# ---------------------------------------------------------------------------
# Route handlers
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=VersionListResponse,
    status_code=status.HTTP_200_OK,
    summary="List recent versions of a document",
)
async def list_versions(
    document_id: str,
    engine: EngineDep,
    limit: Annotated[int | None, Query(ge=1, description="Maximum versions to return")] = None,
) -> VersionListResponse:
    versions = await engine.list_versions(document_id, limit=limit)
    return VersionListResponse(
        document_id=document_id,
        versions=[VersionResponse.from_version(version) for version in versions],
    )


@router.get(
    "/compare",
    response_model=CompareResponse,
    status_code=status.HTTP_200_OK,
    summary="Diff the document states after two versions",
)
async def compare_versions(
    document_id: str,
    engine: EngineDep,
    from_version: Annotated[str, Query(description="Version whose state is the before side")],
    to_version: Annotated[str, Query(description="Version whose state is the after side")],
) -> CompareResponse:
    changes = await engine.compare_versions(document_id, from_version, to_version)
    return CompareResponse(
        document_id=document_id,
        from_version_id=from_version,
        to_version_id=to_version,
        changes=changes_to_json(changes),
    )


@router.get(
    "/{version_id}",
    response_model=VersionResponse,
    status_code=status.HTTP_200_OK,
    summary="Get one version",
)
async def get_version(document_id: str, version_id: str, engine: EngineDep) -> VersionResponse:
    version = await engine.get_version(document_id, version_id)
    return VersionResponse.from_version(version)


@router.get(
    "/{version_id}/document",
    response_model=ReconstructResponse,
    status_code=status.HTTP_200_OK,
    summary="Reconstruct the document as of a version",
)
async def reconstruct_document(
    document_id: str,
    version_id: str,
    engine: EngineDep,
) -> ReconstructResponse:
    document = await engine.reconstruct_at(document_id, version_id)
    return ReconstructResponse(document_id=document_id, version_id=version_id, document=document)


@router.post(
    "/{version_id}/restore",
    response_model=RestoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Restore the document to a version",
)
async def restore_version(
    document_id: str,
    version_id: str,
    body: RestoreRequest,
    engine: EngineDep,
    response: Response,
) -> RestoreResponse:
    """Restore a version by writing its state as a new forward version.

    Returns 201 with the new version, or 200 with ``version: null`` when the
    live document already matched the target state.
    """
    logger.info(
        "POST restore",
        document_id=document_id,
        version_id=version_id,
        acting_user_id=body.acting_user_id,
    )
    version = await engine.restore(
        document_id,
        version_id,
        acting_user_id=body.acting_user_id,
        acting_user_name=body.acting_user_name,
    )
    if version is None:
        response.status_code = status.HTTP_200_OK
    return RestoreResponse(
        document_id=document_id,
        restored_version_id=version_id,
        version=VersionResponse.from_version(version) if version is not None else None,
    )


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

_STATUS_BY_ERROR: dict[type[VersionHistoryError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    VersionNotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


async def _handle_engine_error(request: Request, exc: VersionHistoryError) -> JSONResponse:
    status_code = next(
        (_STATUS_BY_ERROR[cls] for cls in type(exc).__mro__ if cls in _STATUS_BY_ERROR),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Map VersionHistoryError subclasses to JSON error responses.

    Args:
        app: The application to register handlers on.
    """
    app.add_exception_handler(VersionHistoryError, _handle_engine_error)
