"""
Services package for Employee Hub.

Re-exports the record service, the user-facing message helpers, and the
presentation state holders so callers can import from `employee_hub.services`
directly.
"""

from employee_hub.services.employee_service import EmployeeService
from employee_hub.services.messages import operation_message, user_message
from employee_hub.services.state import EmployeeDirectory, EmployeeEditor

__all__ = [
    "EmployeeService",
    "operation_message",
    "user_message",
    "EmployeeDirectory",
    "EmployeeEditor",
]
