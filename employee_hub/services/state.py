"""
Presentation state holders.

Plain objects a UI binds to: `EmployeeDirectory` backs the list screen and
`EmployeeEditor` backs the add/edit form. They hold only transient state
(form values, busy flags, the last status message); the store remains the
single source of truth.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional

from employee_hub.domain.models import Employee, EmployeeInput
from employee_hub.domain.results import Ok, ValidationFailed
from employee_hub.infrastructure.live import Subscription
from employee_hub.services.employee_service import EmployeeService
from employee_hub.services.messages import operation_message, user_message
from employee_hub.utils.logging import get_logger

log = get_logger(__name__)


class EmployeeDirectory:
    """State for the employee list screen."""

    def __init__(self, service: EmployeeService) -> None:
        self._service = service
        self._subscription: Optional[Subscription] = None
        self.employees: List[Employee] = []
        self.selected: Optional[Employee] = None
        self.message: Optional[str] = None
        self.is_loading = False
        self.is_deleting = False

    @property
    def is_open(self) -> bool:
        return self._subscription is not None and self._subscription.active

    async def open(self) -> None:
        """Start following the live listing."""
        if self.is_open:
            return
        self._subscription = await self._service.list_all().subscribe(self._on_snapshot)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _on_snapshot(self, employees: List[Employee]) -> None:
        self.employees = list(employees)
        if self.selected is not None:
            self.selected = next((e for e in self.employees if e.id == self.selected.id), None)

    def select(self, employee: Optional[Employee]) -> None:
        self.selected = employee

    def post_message(self, message: str) -> None:
        self.message = message

    def clear_message(self) -> None:
        self.message = None

    async def load_selected(self, employee_id: int) -> bool:
        self.is_loading = True
        try:
            result = await self._service.get_by_id(employee_id)
        finally:
            self.is_loading = False
        if isinstance(result, Ok):
            self.selected = result.value
            return True
        self.message = user_message(result)
        return False

    async def delete(self, employee: Employee) -> bool:
        if self.is_deleting:
            return False
        self.is_deleting = True
        try:
            result = await self._service.delete(employee)
        finally:
            self.is_deleting = False
        if isinstance(result, Ok):
            self.message = operation_message(True, "delete")
            return True
        self.message = user_message(result)
        return False


class EmployeeEditor:
    """
    State for the add/edit employee form.

    A save or delete issued while another one is still running is ignored,
    so a double tap on the submit button cannot create two employees.
    """

    def __init__(self, service: EmployeeService) -> None:
        self._service = service
        self.form = EmployeeInput()
        self.field_errors: Dict[str, str] = {}
        self.message: Optional[str] = None
        self.saved_id: Optional[int] = None
        self.is_loading = False
        self.is_saving = False
        self.is_deleting = False

    @property
    def busy(self) -> bool:
        return self.is_loading or self.is_saving or self.is_deleting

    def change(self, **values: Any) -> None:
        """Update form values; editing clears every field error."""
        self.form = replace(self.form, **values)
        self.field_errors = {}

    def clear_message(self) -> None:
        self.message = None

    async def load(self, employee_id: int) -> bool:
        """Populate the form from a stored employee."""
        self.is_loading = True
        self.message = None
        try:
            result = await self._service.get_by_id(employee_id)
        finally:
            self.is_loading = False
        if isinstance(result, Ok):
            self.form = EmployeeInput.from_employee(result.value)
            self.field_errors = {}
            return True
        self.message = user_message(result)
        return False

    async def save(self, existing_id: Optional[int] = None) -> bool:
        """
        Create a new employee, or update `existing_id` when given.

        Returns True on success. Field errors land in `field_errors`; any other
        failure lands in `message`.
        """
        if self.is_saving:
            log.debug("Ignoring duplicate save request")
            return False
        errors = self._service.validate(self.form)
        if errors:
            self.field_errors = errors
            return False

        self.is_saving = True
        self.message = None
        operation = "update" if existing_id else "add"
        try:
            if existing_id:
                result = await self._service.update(existing_id, self.form)
            else:
                result = await self._service.create(self.form)
        finally:
            self.is_saving = False

        if isinstance(result, Ok):
            self.saved_id = existing_id if existing_id else result.value
            self.field_errors = {}
            self.message = operation_message(True, operation)
            return True
        if isinstance(result, ValidationFailed):
            self.field_errors = dict(result.errors)
        self.message = user_message(result)
        return False

    async def delete(self, employee_id: int) -> bool:
        if self.is_deleting:
            return False
        self.is_deleting = True
        self.message = None
        try:
            result = await self._service.delete(employee_id)
        finally:
            self.is_deleting = False
        if isinstance(result, Ok):
            self.message = operation_message(True, "delete")
            return True
        self.message = user_message(result)
        return False


__all__ = ["EmployeeDirectory", "EmployeeEditor"]
