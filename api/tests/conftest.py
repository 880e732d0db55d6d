"""Pytest configuration and shared fixtures."""

import asyncio
import os

# Must be set before pipe_catalog.settings is imported
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from pipe_catalog.database import create_tables, get_sessionmaker, make_session_factory
from pipe_catalog.main import app


@pytest.fixture
def engine(tmp_path):
    """Temporary SQLite file database; NullPool so every event loop gets fresh connections."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}", poolclass=NullPool)
    asyncio.run(create_tables(eng))
    yield eng
    asyncio.run(eng.dispose())


@pytest.fixture
def sessions(engine):
    return make_session_factory(engine)


@pytest.fixture
def add_rows(sessions):
    """Insert ORM objects and commit."""
    def _add(*objs):
        async def go():
            async with sessions() as db:
                db.add_all(objs)
                await db.commit()
        asyncio.run(go())
        return objs
    return _add


@pytest.fixture
def client(sessions):
    app.dependency_overrides[get_sessionmaker] = lambda: sessions
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


