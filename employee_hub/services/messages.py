"""User-facing status text for service outcomes."""

from __future__ import annotations

from employee_hub.domain.results import (
    Conflict,
    InvalidArgument,
    NotFound,
    ServiceError,
    StorageFailure,
    ValidationFailed,
)

_SUCCESS = {
    "add": "Employee added successfully!",
    "update": "Employee updated successfully!",
    "delete": "Employee deleted successfully!",
    "load": "Employee loaded successfully!",
}

_FAILURE = {
    "add": "Failed to add employee. Please try again.",
    "update": "Failed to update employee. Please try again.",
    "delete": "Failed to delete employee. Please try again.",
    "load": "Failed to load employee. Please try again.",
}


def operation_message(success: bool, operation: str) -> str:
    if success:
        return _SUCCESS.get(operation, "Operation completed successfully!")
    return _FAILURE.get(operation, "Operation failed. Please try again.")


def user_message(error: ServiceError) -> str:
    """Short message for a failure result, safe to show to end users."""
    if isinstance(error, ValidationFailed):
        return error.message
    if isinstance(error, InvalidArgument):
        return f"Invalid data: {error.message}"
    if isinstance(error, NotFound):
        return "Employee not found."
    if isinstance(error, Conflict):
        return "An employee with this email already exists."
    if isinstance(error, StorageFailure):
        return error.message
    raise TypeError(f"Unsupported result type: {type(error).__name__}")


__all__ = ["operation_message", "user_message"]
