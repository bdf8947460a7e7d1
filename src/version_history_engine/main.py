"""Standalone application entry point for the version history engine.

Initializes the FastAPI application with:
- Logging configured from settings
- The configured storage backend (process-local memory stores, or the SQL
  database engine opened in the lifespan handler)
- The version history router under /api/v1 and engine error handlers
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from version_history_engine.adapters.database import close_database, create_schema, init_database
from version_history_engine.adapters.memory_store import InMemoryDocumentStore, InMemoryVersionStore
from version_history_engine.history.routes import register_exception_handlers, router
from version_history_engine.observability import configure_logging, get_logger
from version_history_engine.settings import Settings

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Memory stores are attached to app.state immediately so the app serves
    requests even when the lifespan handler is not run (ASGI test clients).

    Args:
        settings: Service settings. Read from the environment when omitted.

    Returns:
        The configured application.
    """
    settings = settings or Settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Open and close the SQL backend around the application's lifetime.

        Args:
            app: The FastAPI application instance.

        Yields:
            None
        """
        if settings.storage_backend == "sql":
            init_database(
                settings.database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
            )
            if settings.db_create_schema:
                logger.info("Creating version history tables")
                await create_schema()
        logger.info(
            "Version history engine startup complete",
            service=settings.service_name,
            storage_backend=settings.storage_backend,
        )

        yield

        logger.info("Shutting down version history engine")
        await close_database()

    app = FastAPI(title=settings.service_name, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    if settings.storage_backend == "memory":
        app.state.document_store = InMemoryDocumentStore()
        app.state.version_store = InMemoryVersionStore()

    app.include_router(router, prefix="/api/v1")
    register_exception_handlers(app)
    return app
