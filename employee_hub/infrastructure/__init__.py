"""
Infrastructure package for Employee Hub.

Centralizes persistence concerns: the storage interface, the SQLite and
PostgreSQL engines, live queries, and the factories that open them. Keep this
layer focused on I/O, decoupled from validation and service logic.
"""

from employee_hub.infrastructure.db_factory import (
    build_dsn,
    connect_sqlite,
    create_store,
    open_async_pool,
    open_postgres_store,
    open_sqlite_store,
)
from employee_hub.infrastructure.live import ChangeNotifier, LiveQuery, Subscription
from employee_hub.infrastructure.storage import (
    AbstractEmployeeStore,
    DuplicateEmailError,
    EmployeeStore,
    ListingOrder,
    MissingRecordError,
    StorageError,
)

__all__ = [
    # Factories
    "build_dsn",
    "connect_sqlite",
    "create_store",
    "open_async_pool",
    "open_postgres_store",
    "open_sqlite_store",
    # Live queries
    "ChangeNotifier",
    "LiveQuery",
    "Subscription",
    # Storage interface
    "AbstractEmployeeStore",
    "DuplicateEmailError",
    "EmployeeStore",
    "ListingOrder",
    "MissingRecordError",
    "StorageError",
]
