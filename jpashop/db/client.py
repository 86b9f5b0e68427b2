"""
Async Database Client

Uses SQLAlchemy 2.0 async sessions. Every data access goes through an
explicit unit of work from `get_db_session()`; nothing keeps a session open
implicitly across layers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from jpashop.config import get_settings
from jpashop.db.instrumentation import install_statement_counter
from jpashop.db.models import Base

logger = structlog.get_logger()

# Global engine and session factory
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_kwargs(database_url: str) -> dict[str, object]:
    settings = get_settings()

    engine_kwargs: dict[str, object] = {
        "echo": settings.log_level == "DEBUG",
    }
    if settings.db_pool_mode == "null":
        engine_kwargs["poolclass"] = NullPool
    elif settings.db_pool_mode == "static":
        # One shared connection; required for in-memory SQLite.
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = max(1, int(settings.db_pool_size))
        engine_kwargs["max_overflow"] = max(0, int(settings.db_pool_max_overflow))
        engine_kwargs["pool_timeout"] = max(1, int(settings.db_pool_timeout_seconds))
        engine_kwargs["pool_recycle"] = max(60, int(settings.db_pool_recycle_seconds))
        engine_kwargs["pool_pre_ping"] = True

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}

    return engine_kwargs


async def init_db(database_url: str | None = None) -> None:
    """Initialize the engine and session factory."""
    global _engine, _session_factory

    settings = get_settings()
    database_url = database_url or str(settings.database_url)

    _engine = create_async_engine(
        database_url,
        **_engine_kwargs(database_url),
    )
    install_statement_counter(_engine)

    # Loaded attributes survive commit so DTOs can be shaped after the
    # scope ends; unloaded lazy attributes still fail once detached.
    _session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    logger.info(
        "Database engine initialized",
        url=database_url[:50] + "...",
        pool_mode=settings.db_pool_mode,
    )


async def close_db() -> None:
    """Dispose the engine."""
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine closed")


def get_async_engine() -> AsyncEngine:
    """Get the async engine instance."""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


async def create_schema() -> None:
    """Create all tables (development and tests; production uses Alembic)."""
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema created")


async def drop_schema() -> None:
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Open a unit of work.

    Commits on success, rolls back on error and always closes, so the
    connection goes back to the pool on every exit path.

    Usage:
        async with get_db_session() as session:
            orders = await order_repository.find_all_with_item(session)
            dtos = [OrderDto.from_order(o) for o in orders]
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    session = _session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_view_session() -> AsyncGenerator[AsyncSession | None, None]:
    """
    FastAPI dependency for open-session-in-view.

    Yields a session that lives until the request finishes when
    `open_session_in_view` is enabled, otherwise yields None and the handler
    must open its own unit of work.
    """
    if not get_settings().open_session_in_view:
        yield None
        return

    async with get_db_session() as session:
        yield session
