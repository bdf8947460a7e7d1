"""Database engine lifecycle for the SQL storage backend.

Key exports:
- init_database(...)   - Call at startup to initialize the engine
- close_database()     - Call at shutdown to dispose the engine
- session_scope()      - Async context manager yielding a committed-or-rolled-back session
- create_schema()      - Create the vh_ tables (development and tests against a real DB)
- store_errors(...)    - Translate SQLAlchemy failures into engine errors
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from version_history_engine.adapters.sql_models import Base
from version_history_engine.errors import ConflictError, StoreUnavailableError
from version_history_engine.observability import get_logger

logger = get_logger(__name__)

# Module-level engine and session factory - initialized by init_database()
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_database(
    database_url: str,
    pool_size: int = 5,
    max_overflow: int = 2,
    pool_timeout: int = 30,
) -> None:
    """Initialize the database engine and session factory.

    Must be called once at application startup before any SQL store is used.

    Args:
        database_url: Async SQLAlchemy connection URL.
        pool_size: Connection pool size.
        max_overflow: Max overflow connections above pool_size.
        pool_timeout: Seconds to wait for a connection before raising.
    """
    global _engine, _session_factory  # noqa: PLW0603

    logger.info("Initializing database engine", pool_size=pool_size, max_overflow=max_overflow)

    _engine = create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        echo=False,
        pool_pre_ping=True,
    )
    _session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def close_database() -> None:
    """Dispose the database engine. Safe to call when not initialized."""
    global _engine, _session_factory  # noqa: PLW0603

    if _engine is not None:
        logger.info("Disposing database engine")
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def create_schema() -> None:
    """Create all vh_ tables that do not exist yet.

    Raises:
        RuntimeError: If init_database() has not been called yet.
    """
    if _engine is None:
        raise RuntimeError("Database has not been initialized. Call init_database() first.")
    async with _engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on error.

    Raises:
        RuntimeError: If init_database() has not been called yet.
        StoreUnavailableError: If the commit itself fails.
    """
    if _session_factory is None:
        raise RuntimeError(
            "Database has not been initialized. "
            "Call init_database() in the application lifespan handler."
        )

    async with _session_factory() as session:
        try:
            yield session
            async with store_errors("commit"):
                await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def store_errors(operation: str) -> AsyncIterator[None]:
    """Translate SQLAlchemy exceptions raised inside the block.

    IntegrityError becomes ConflictError (duplicate document or a lost
    sequence race); any other SQLAlchemyError becomes StoreUnavailableError.
    Nothing is retried.

    Args:
        operation: Short name of the store operation, used in logs and messages.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Store integrity conflict", operation=operation, error=str(exc.orig))
        raise ConflictError(f"Concurrent write conflict during {operation}") from exc
    except SQLAlchemyError as exc:
        logger.error("Store unavailable", operation=operation, error=str(exc))
        raise StoreUnavailableError(f"Backing store failed during {operation}") from exc
