"""Database handle and schema management for the expense store.

The engine is created once per process and passed explicitly to the store
and aggregator. ``ensure_schema`` must complete before either accepts calls.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    Table,
    Text,
    func,
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from .exceptions import StorageError

__all__ = [
    "DEFAULT_DATABASE_URL",
    "expenses_table",
    "metadata",
    "create_engine",
    "ensure_schema",
    "dispose_engine",
    "connect",
    "is_memory_database",
]

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///expenses.db"

metadata = MetaData()

expenses_table = Table(
    "expenses",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("category", Text, nullable=False),
    Column("amount", Float, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again.
    sqlite_autoincrement=True,
)


def is_memory_database(database_url: str) -> bool:
    database = make_url(database_url).database
    return database in (None, "", ":memory:")


def create_engine(database_url: str = DEFAULT_DATABASE_URL) -> AsyncEngine:
    """Build the async engine that serves as the single database handle.

    An in-memory database lives only as long as its connection, so it is
    pinned to one shared connection. File databases open a connection per
    operation, which lets callers drive the same engine from any event loop.
    """
    if is_memory_database(database_url):
        return create_async_engine(database_url, poolclass=StaticPool)
    return create_async_engine(database_url, poolclass=NullPool)


def _error_message(exc: SQLAlchemyError) -> str:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


@asynccontextmanager
async def connect(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    """Yield a connection in its own transaction, mapping failures to StorageError."""
    try:
        async with engine.begin() as conn:
            yield conn
    except SQLAlchemyError as exc:
        message = _error_message(exc)
        logger.error("Database operation failed: %s", message)
        raise StorageError(message) from exc


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create the expenses table if it does not exist yet. Safe to call repeatedly."""
    async with connect(engine) as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Expenses table ready (%s)", engine.url.render_as_string(hide_password=True))


async def dispose_engine(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("Closed database connection")
