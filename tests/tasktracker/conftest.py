"""Shared fixtures for tasktracker tests.

Every test gets its own in-memory SQLite database (``sqlite+aiosqlite://``),
so no external service is needed.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tasktracker.core.database import create_engine, init_schema

DEFAULT_DB_URL = "sqlite+aiosqlite://"


@pytest.fixture
def db_url():
    return DEFAULT_DB_URL


@pytest_asyncio.fixture
async def engine(db_url):
    """Fresh engine + schema per test."""
    eng = create_engine(db_url)
    await init_schema(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    """Provide a transactional session that rolls back after each test."""
    async with session_factory() as sess:
        async with sess.begin():
            yield sess
            await sess.rollback()
