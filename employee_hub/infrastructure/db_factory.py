"""
Database connection factory utilities for Employee Hub.

Builds the storage engine selected in settings. Stores are constructed
explicitly and handed to the service by the caller; nothing here keeps a
process-wide instance.

Includes retry logic for transient failures while opening the database using
tenacity. Writes issued later through a store are never retried.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

import psycopg
from psycopg_pool import AsyncConnectionPool, PoolTimeout
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from employee_hub.config import Settings, get_settings
from employee_hub.infrastructure.postgres_store import PostgresEmployeeStore
from employee_hub.infrastructure.sqlite_store import SqliteEmployeeStore
from employee_hub.infrastructure.storage import EmployeeStore
from employee_hub.utils.logging import get_logger

log = get_logger(__name__)

MEMORY_DATABASE = ":memory:"


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a PostgreSQL DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(sqlite3.OperationalError),
    reraise=True,
)
def connect_sqlite(path: str) -> sqlite3.Connection:
    """
    Open a SQLite connection with automatic retry.

    Retries up to 3 times with exponential backoff while the file is locked by
    another process. The connection may be used from worker threads; callers
    must serialize access.

    Parameters
    ----------
    path : str
        Database file path, or ":memory:" for a private in-memory database.

    Raises
    ------
    sqlite3.OperationalError
        If the database cannot be opened after all retry attempts.
    """
    if path == MEMORY_DATABASE:
        return sqlite3.connect(path, check_same_thread=False)
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(target), timeout=5.0, check_same_thread=False)
    try:
        conn.execute("PRAGMA journal_mode = WAL")
    except sqlite3.Error:
        conn.close()
        raise
    return conn


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, PoolTimeout)),
    reraise=True,
)
async def open_async_pool(dsn: str, min_size: int = 1, max_size: int = 4) -> AsyncConnectionPool:
    """
    Create and open an asynchronous connection pool with automatic retry.

    Parameters
    ----------
    dsn : str
        PostgreSQL connection string.
    min_size : int
        Minimum number of idle connections to keep.
    max_size : int
        Maximum total connections in the pool.

    Returns
    -------
    AsyncConnectionPool
        An opened pool ready to serve connections.
    """
    pool = AsyncConnectionPool(conninfo=dsn, min_size=min_size, max_size=max_size, open=False)
    try:
        await pool.open(wait=True, timeout=10.0)
    except BaseException:
        await pool.close()
        raise
    return pool


async def open_sqlite_store(path: str) -> SqliteEmployeeStore:
    """Open (and create if needed) a SQLite-backed store."""
    store = SqliteEmployeeStore(connect_sqlite(path))
    try:
        store.initialize()
    except BaseException:
        await store.close()
        raise
    return store


async def open_postgres_store(
    dsn: str, min_size: int = 1, max_size: int = 4
) -> PostgresEmployeeStore:
    """Open a PostgreSQL-backed store and ensure its schema exists."""
    pool = await open_async_pool(dsn, min_size=min_size, max_size=max_size)
    store = PostgresEmployeeStore(pool)
    try:
        await store.initialize()
    except BaseException:
        await store.close()
        raise
    return store


async def create_store(settings: Optional[Settings] = None) -> EmployeeStore:
    """
    Build the store selected by `settings.storage_backend`.

    Failing to open the storage engine is fatal: the exception propagates to
    the caller.
    """
    settings = settings or get_settings()
    if settings.storage_backend == "postgres":
        log.info(
            "Opening PostgreSQL store",
            extra={"db_host": settings.db_host, "db_name": settings.db_name},
        )
        return await open_postgres_store(
            build_dsn(settings),
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
    log.info("Opening SQLite store", extra={"sqlite_path": settings.sqlite_path})
    return await open_sqlite_store(settings.sqlite_path)


__all__ = [
    "build_dsn",
    "connect_sqlite",
    "create_store",
    "open_async_pool",
    "open_postgres_store",
    "open_sqlite_store",
]
