"""
Domain models for Employee Hub.

`Employee` mirrors a row of the `employees` table. `EmployeeInput` carries the
raw, unvalidated values typed into a form; it is never authoritative and only
becomes an `Employee` after validation passes.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field

SalaryInput = Union[str, int, float, Decimal, None]

FIELD_NAMES = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "address",
    "designation",
    "salary",
)


class Employee(BaseModel):
    """
    Representation of a single row in the `employees` table.
    """

    id: int = Field(0, description="Primary key; 0 until the store assigns one.")
    first_name: str = Field(..., description="Given name.")
    last_name: str = Field(..., description="Family name.")
    email: Optional[str] = Field(None, description="Unique contact address.")
    phone_number: Optional[str] = Field(None, description="Contact phone number.")
    address: Optional[str] = Field(None, description="Postal address.")
    designation: Optional[str] = Field(None, description="Job title.")
    salary: Decimal = Field(..., ge=0, description="Salary amount.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def initials(self) -> str:
        first = self.first_name[:1].upper()
        last = self.last_name[:1].upper()
        return f"{first}{last}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def with_id(self, employee_id: int) -> "Employee":
        return self.model_copy(update={"id": employee_id})


@dataclass(frozen=True)
class EmployeeInput:
    """
    Raw form values for an employee, exactly as the user entered them.

    Every field is free text except `salary`, which may also arrive as a number
    from programmatic callers.
    """

    first_name: Any = ""
    last_name: Any = ""
    email: Any = ""
    phone_number: Any = ""
    address: Any = ""
    designation: Any = ""
    salary: SalaryInput = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EmployeeInput":
        """Build an input from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_employee(cls, employee: Employee) -> "EmployeeInput":
        """Populate a form from a stored employee (used when editing)."""
        return cls(
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email or "",
            phone_number=employee.phone_number or "",
            address=employee.address or "",
            designation=employee.designation or "",
            salary=str(employee.salary),
        )

    def trimmed(self) -> "EmployeeInput":
        """Return a copy with surrounding whitespace stripped from text values."""
        changes = {
            f.name: getattr(self, f.name).strip()
            for f in fields(self)
            if isinstance(getattr(self, f.name), str)
        }
        return replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in FIELD_NAMES}


__all__ = ["Employee", "EmployeeInput", "FIELD_NAMES", "SalaryInput"]
