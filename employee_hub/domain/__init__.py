"""
Domain package for Employee Hub.

Exports the employee models, the validation rules, and the result contracts
used by the service. Keep this package free of I/O.
"""

from employee_hub.domain.models import FIELD_NAMES, Employee, EmployeeInput
from employee_hub.domain.results import (
    Conflict,
    InvalidArgument,
    NotFound,
    Ok,
    Result,
    ServiceError,
    StorageFailure,
    ValidationFailed,
    is_ok,
)
from employee_hub.domain.validation import (
    DEFAULT_POLICY,
    ValidationPolicy,
    employee_from_input,
    validate_employee_input,
)

__all__ = [
    "FIELD_NAMES",
    "Employee",
    "EmployeeInput",
    # Results
    "Conflict",
    "InvalidArgument",
    "NotFound",
    "Ok",
    "Result",
    "ServiceError",
    "StorageFailure",
    "ValidationFailed",
    "is_ok",
    # Validation
    "DEFAULT_POLICY",
    "ValidationPolicy",
    "employee_from_input",
    "validate_employee_input",
]
