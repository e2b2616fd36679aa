"""
Pytest configuration for Employee Hub.

Provides fixtures for:
- In-memory SQLite stores and services for unit tests
- Canonical employee input used across scenarios
- PostgreSQL connection management for integration tests
"""

from __future__ import annotations

import os
from typing import AsyncGenerator

import psycopg
import pytest
import pytest_asyncio

from employee_hub.config import Settings
from employee_hub.domain.models import EmployeeInput
from employee_hub.infrastructure.db_factory import (
    MEMORY_DATABASE,
    build_dsn,
    open_postgres_store,
    open_sqlite_store,
)
from employee_hub.infrastructure.postgres_store import PostgresEmployeeStore
from employee_hub.infrastructure.sqlite_store import SqliteEmployeeStore
from employee_hub.services.employee_service import EmployeeService


@pytest.fixture
def ann_input() -> EmployeeInput:
    """Valid input for the reference employee."""
    return EmployeeInput(
        first_name="Ann",
        last_name="Lee",
        email="ann@x.com",
        phone_number="5551234567",
        address="1 Main St",
        designation="Engineer",
        salary=90000,
    )


@pytest.fixture
def bob_input() -> EmployeeInput:
    return EmployeeInput(
        first_name="Bob",
        last_name="Stone",
        email="bob@example.org",
        phone_number="+1 555-765-4321",
        address="22 Side Rd",
        designation="Designer",
        salary="72000.50",
    )


@pytest_asyncio.fixture
async def sqlite_store() -> AsyncGenerator[SqliteEmployeeStore, None]:
    """A fresh in-memory SQLite store per test."""
    store = await open_sqlite_store(MEMORY_DATABASE)
    try:
        yield store
    finally:
        await store.close()


@pytest_asyncio.fixture
async def service(sqlite_store: SqliteEmployeeStore) -> EmployeeService:
    return EmployeeService(sqlite_store)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        storage_backend="postgres",
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "employee_hub"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except Exception:
        return False


@pytest_asyncio.fixture
async def postgres_store(
    test_dsn: str, db_connection_available: bool
) -> AsyncGenerator[PostgresEmployeeStore, None]:
    """
    A PostgreSQL store with an empty employees table.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    store = await open_postgres_store(test_dsn, min_size=1, max_size=2)
    with psycopg.connect(test_dsn) as conn:
        conn.execute("TRUNCATE TABLE public.employees RESTART IDENTITY;")
    try:
        yield store
    finally:
        with psycopg.connect(test_dsn) as conn:
            conn.execute("TRUNCATE TABLE public.employees RESTART IDENTITY;")
        await store.close()
