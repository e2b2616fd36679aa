"""
Employee Hub - validated employee record management over a local database.

This package provides:

- Domain models, field validation rules, and typed service results
- A storage interface with SQLite (default) and PostgreSQL engines
- Live queries that push fresh listings to subscribers after every write
- The employee service plus presentation state holders for list and form screens
- A Typer CLI (`employee-hub`)
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from employee_hub.config import Settings, get_settings
from employee_hub.domain import (
    Conflict,
    Employee,
    EmployeeInput,
    InvalidArgument,
    NotFound,
    Ok,
    StorageFailure,
    ValidationFailed,
    ValidationPolicy,
    validate_employee_input,
)
from employee_hub.infrastructure import (
    EmployeeStore,
    ListingOrder,
    LiveQuery,
    Subscription,
    create_store,
)
from employee_hub.services import EmployeeDirectory, EmployeeEditor, EmployeeService
from employee_hub.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Employee",
    "EmployeeInput",
    "ValidationPolicy",
    "validate_employee_input",
    # Results
    "Ok",
    "Conflict",
    "InvalidArgument",
    "NotFound",
    "StorageFailure",
    "ValidationFailed",
    # Storage
    "EmployeeStore",
    "ListingOrder",
    "LiveQuery",
    "Subscription",
    "create_store",
    # Services
    "EmployeeService",
    "EmployeeDirectory",
    "EmployeeEditor",
    # Logging
    "configure_logging",
    "get_logger",
]
