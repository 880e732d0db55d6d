# pipe_catalog/database.py
"""
Database connection for the Pipe Catalog.

Uses SQLAlchemy 2.0 async (asyncpg driver by default).
"""
from __future__ import annotations
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text

from pipe_catalog.settings import settings

# ============================================================================
# Declarative base
# ============================================================================

class Base(DeclarativeBase):
    """Declarative base shared by the catalog tables."""


# ============================================================================
# Engine, session factory, dependencies
# ============================================================================

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """DATABASE_URL when set, else a PostgreSQL (asyncpg) URL from the DB_* parts."""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    return (
        f"postgresql+asyncpg://"
        f"{settings.DB_USER}:{settings.DB_PASSWORD}@"
        f"{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(url: Optional[str] = None) -> None:
    """Create the process-wide engine and session factory once."""
    global _engine, _async_session_factory

    if _engine is not None:
        return

    url = url or get_database_url()
    kwargs = {}
    if url.startswith("postgresql"):
        kwargs = dict(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )

    _engine = create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        **kwargs,
    )
    _async_session_factory = make_session_factory(_engine)


async def close_db() -> None:
    """Dispose the engine (app shutdown)."""
    global _engine, _async_session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None


async def create_tables(engine: Optional[AsyncEngine] = None) -> None:
    """Create all catalog tables that do not exist yet."""
    # registers the mapped classes on Base.metadata
    from pipe_catalog import db_models  # noqa: F401

    if engine is None:
        await init_db()
        engine = _engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """
    Dependency for FastAPI - provides the session factory.

    Search fans out over several concurrent queries, and an AsyncSession
    cannot run two statements at once, so each branch opens its own session.
    """
    if _async_session_factory is None:
        await init_db()
    return _async_session_factory


@asynccontextmanager
async def get_session_context(
    factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    One committed-or-rolled-back session, for scripts such as the seeder.

        async with get_session_context(sessions) as db:
            db.add(Pipe(...))
    """
    if factory is None:
        if _async_session_factory is None:
            await init_db()
        factory = _async_session_factory

    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ============================================================================
# Health Check
# ============================================================================

async def check_db_health(factory: Optional[async_sessionmaker[AsyncSession]] = None) -> dict:
    """`SELECT 1` through a fresh session; never raises."""
    try:
        async with get_session_context(factory) as db:
            result = await db.execute(text("SELECT 1"))
            result.scalar()
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return {"status": "unhealthy", "database": "disconnected", "error": str(e)}
