"""
Validated record-management service for employees.

`EmployeeService` is the only entry point the presentation layer uses to read
and write employees. It validates input before any write, delegates
persistence to an injected `EmployeeStore`, and turns storage failures into
`Result` values with generic, user-safe messages. Storage exceptions are
logged here with their cause and never passed through.

Usage:
    store = await create_store(settings)
    service = EmployeeService(store, policy=settings.validation_policy())

    result = await service.create(EmployeeInput(first_name="Ann", ...))
    if isinstance(result, Ok):
        print("created", result.value)
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from employee_hub.domain.models import Employee, EmployeeInput
from employee_hub.domain.results import (
    Conflict,
    InvalidArgument,
    NotFound,
    Ok,
    Result,
    StorageFailure,
    ValidationFailed,
)
from employee_hub.domain.validation import (
    DEFAULT_POLICY,
    ValidationPolicy,
    employee_from_input,
    validate_employee_input,
)
from employee_hub.infrastructure.live import LiveQuery
from employee_hub.infrastructure.storage import (
    DuplicateEmailError,
    EmployeeStore,
    ListingOrder,
    MissingRecordError,
    StorageError,
)
from employee_hub.utils.logging import get_logger

log = get_logger(__name__)

FieldsLike = Union[EmployeeInput, Mapping[str, Any]]

INVALID_ID_MESSAGE = "Employee ID must be greater than 0"
DUPLICATE_EMAIL_MESSAGE = "Employee with this email already exists"


def _as_input(fields: FieldsLike) -> EmployeeInput:
    if isinstance(fields, EmployeeInput):
        return fields
    return EmployeeInput.from_mapping(fields)


def _valid_id(employee_id: Any) -> bool:
    return isinstance(employee_id, int) and not isinstance(employee_id, bool) and employee_id > 0


class EmployeeService:
    """
    CRUD surface over an employee store with validation and error mapping.

    Parameters
    ----------
    store : EmployeeStore
        Storage engine; owned by the caller, who closes it.
    policy : ValidationPolicy
        Field requiredness and bounds. Defaults to the strictest rule set.
    listing_order : ListingOrder
        Ordering used by `list_all`.
    """

    def __init__(
        self,
        store: EmployeeStore,
        policy: ValidationPolicy = DEFAULT_POLICY,
        listing_order: ListingOrder | str = ListingOrder.FIRST_NAME,
    ) -> None:
        self.store = store
        self.policy = policy
        self.listing_order = ListingOrder(listing_order)

    # Reads

    def list_all(self) -> LiveQuery[List[Employee]]:
        """
        Live listing of every employee; an empty store yields an empty list.

        A failed fetch is logged and delivered as an empty list. Use
        `list_snapshot` to tell a failure apart from an empty store.
        """
        return self.store.observe_all(self.listing_order).recover(StorageError, self._listing_failed)

    def observe(self, employee_id: int) -> LiveQuery[Optional[Employee]]:
        """Live view of a single employee (None while absent or unreadable)."""

        def failed(exc: BaseException) -> Optional[Employee]:
            log.exception("Failed to observe employee", extra={"employee_id": employee_id})
            return None

        return self.store.observe_by_id(employee_id).recover(StorageError, failed)

    async def list_snapshot(self) -> Result[List[Employee]]:
        """One-shot listing that reports storage failures as `StorageFailure`."""
        try:
            employees = await self.store.observe_all(self.listing_order).get()
        except StorageError:
            log.exception("Failed to list employees", extra={"order": self.listing_order.value})
            return StorageFailure("Failed to load employees. Please try again.")
        return Ok(employees)

    def _listing_failed(self, exc: BaseException) -> List[Employee]:
        log.exception("Failed to list employees", extra={"order": self.listing_order.value})
        return []

    def validate(self, fields: FieldsLike) -> dict[str, str]:
        """Validate form input without touching storage."""
        return validate_employee_input(_as_input(fields).trimmed(), self.policy)

    async def get_by_id(self, employee_id: int) -> Result[Employee]:
        if not _valid_id(employee_id):
            return InvalidArgument(INVALID_ID_MESSAGE)
        try:
            employee = await self.store.get_by_id(employee_id)
        except StorageError:
            log.exception("Failed to retrieve employee", extra={"employee_id": employee_id})
            return StorageFailure("Failed to load employee. Please try again.")
        if employee is None:
            return NotFound(f"Employee {employee_id} not found")
        return Ok(employee)

    # Writes

    async def create(self, fields: FieldsLike) -> Result[int]:
        """
        Validate and insert a new employee.

        Returns the id assigned by the store. Invalid input never reaches
        storage; a duplicate email is reported as `Conflict`.
        """
        candidate = _as_input(fields).trimmed()
        errors = validate_employee_input(candidate, self.policy)
        if errors:
            log.info("Rejected invalid employee", extra={"invalid_fields": sorted(errors)})
            return ValidationFailed(errors)

        employee = employee_from_input(candidate)
        try:
            new_id = await self.store.insert(employee)
        except DuplicateEmailError:
            log.warning("Duplicate email on insert", extra={"operation": "create"})
            return Conflict(DUPLICATE_EMAIL_MESSAGE)
        except StorageError:
            log.exception("Failed to insert employee", extra={"operation": "create"})
            return StorageFailure("Failed to add employee. Please try again.")
        log.info("Employee created", extra={"employee_id": new_id})
        return Ok(new_id)

    async def update(self, employee_id: int, fields: FieldsLike) -> Result[Employee]:
        """
        Validate and overwrite the employee stored under `employee_id`.

        The id never changes; the whole record is replaced by the new values.
        """
        if not _valid_id(employee_id):
            return InvalidArgument("Invalid employee ID")
        candidate = _as_input(fields).trimmed()
        errors = validate_employee_input(candidate, self.policy)
        if errors:
            log.info(
                "Rejected invalid employee update",
                extra={"employee_id": employee_id, "invalid_fields": sorted(errors)},
            )
            return ValidationFailed(errors)

        employee = employee_from_input(candidate, employee_id=employee_id)
        try:
            await self.store.update(employee)
        except MissingRecordError:
            log.warning("Update target missing", extra={"employee_id": employee_id})
            return NotFound(f"Employee {employee_id} not found")
        except DuplicateEmailError:
            log.warning("Duplicate email on update", extra={"employee_id": employee_id})
            return Conflict(DUPLICATE_EMAIL_MESSAGE)
        except StorageError:
            log.exception("Failed to update employee", extra={"employee_id": employee_id})
            return StorageFailure("Failed to update employee. Please try again.")
        log.info("Employee updated", extra={"employee_id": employee_id})
        return Ok(employee)

    async def delete(self, target: Union[int, Employee]) -> Result[None]:
        """
        Delete an employee by id or by record.

        Deleting an id that is not stored succeeds without changes.
        """
        employee_id = target.id if isinstance(target, Employee) else target
        if not _valid_id(employee_id):
            return InvalidArgument(INVALID_ID_MESSAGE)
        try:
            if isinstance(target, Employee):
                await self.store.delete(target)
            else:
                await self.store.delete_by_id(employee_id)
        except StorageError:
            log.exception("Failed to delete employee", extra={"employee_id": employee_id})
            return StorageFailure("Failed to delete employee. Please try again.")
        log.info("Employee deleted", extra={"employee_id": employee_id})
        return Ok(None)


__all__ = ["EmployeeService", "FieldsLike"]
