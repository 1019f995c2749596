"""Async database engine, declarative base, and column types."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData, event
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

# Naming convention for constraints (Alembic auto-migration friendly)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all ORM models."""

    metadata = MetaData(naming_convention=convention)


class UTCDateTime(TypeDecorator[datetime]):
    """DateTime stored as naive UTC, loaded back as timezone-aware UTC.

    SQLite has no timezone-aware column type, so the offset is dropped on
    write and re-attached on read.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("naive datetime is not allowed, pass an aware UTC datetime")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def name_key(value: str | None) -> str | None:
    """Comparison key for task names: trimmed and Unicode case-folded."""
    if value is None:
        return None
    return value.strip().casefold()


def _register_sql_functions(dbapi_conn, _connection_record) -> None:
    # Deterministic so SQLite accepts it inside an index expression
    dbapi_conn.create_function("name_key", 1, name_key, deterministic=True)


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create the async engine for *database_url*.

    In-memory SQLite URLs share one connection so every session sees the
    same database. Every new connection gets the ``name_key()`` SQL
    function that the tasks name index is built on.
    """
    kwargs: dict = {"echo": echo}
    if database_url.startswith("sqlite") and (
        database_url.endswith("://") or ":memory:" in database_url
    ):
        kwargs["poolclass"] = StaticPool
    engine = create_async_engine(database_url, **kwargs)
    event.listen(engine.sync_engine, "connect", _register_sql_functions)
    return engine


async def init_schema(engine: AsyncEngine) -> None:
    """Create all tables and indexes that do not exist yet."""
    # Import models so their tables are registered on Base.metadata
    import tasktracker.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
