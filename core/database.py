"""Async SQLAlchemy database engine and session management.

Provides the async database layer with:
- Connection pooling (pool_size/max_overflow, skipped for SQLite)
- FastAPI dependency injection via get_session()
- Automatic session lifecycle (commit on success, rollback on error)
- Foreign keys switched on for SQLite so task rows cascade with their owner
"""

import logging
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import DatabaseConfig, get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Engine factory
# ---------------------------------------------------------------------------

def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every new SQLite connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(config: DatabaseConfig, **overrides: Any) -> AsyncEngine:
    """Create an async engine for the configured store."""
    kwargs: dict[str, Any] = {"echo": config.echo}
    if not config.is_sqlite:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_pre_ping=True,
        )
    kwargs.update(overrides)

    engine = create_async_engine(config.url, **kwargs)
    if config.is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ---------------------------------------------------------------------------
# Process-wide engine
# ---------------------------------------------------------------------------

engine = build_engine(get_settings().database)
async_session_factory = build_session_factory(engine)


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session with automatic commit/rollback.

    Usage in FastAPI routes::

        @router.get("/tasks")
        async def list_tasks(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ---------------------------------------------------------------------------
# Lifecycle hooks
# ---------------------------------------------------------------------------

async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create tables from models (dev/test only)."""
    from core.models.base import Base
    import verticals.accounts.models.db_models  # noqa: F401
    import verticals.tasks.models.db_models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def close_db() -> None:
    """Dispose of the connection pool on shutdown."""
    await engine.dispose()
