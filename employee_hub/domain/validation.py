"""
Field validation for employee input.

`validate_employee_input` is pure and total: it accepts whatever the form
produced (text, numbers, None) and returns a mapping of field name to a
human-readable message. An empty mapping means the input is valid. Each field
is checked independently and only its first failing rule is reported.

Which fields are required and the numeric bounds come from a
`ValidationPolicy`; the default is the strictest rule set.
"""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from employee_hub.domain.models import Employee, EmployeeInput

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})$")
# Plain decimal or scientific notation with at most a three-digit exponent;
# rejects NaN, Infinity and digit separators.
_NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d{1,3})?")
_PHONE_CHARS = frozenset("0123456789+- ")


class ValidationPolicy(BaseModel):
    """
    Requiredness and bounds applied by validation.

    A field that is not required may be left blank; a non-blank value is still
    checked against the remaining rules.
    """

    email_required: bool = True
    phone_required: bool = True
    address_required: bool = True
    designation_required: bool = True
    names_letters_only: bool = False

    name_max_length: int = 50
    email_max_length: int = 100
    phone_min_length: int = 10
    phone_max_length: int = 20
    address_max_length: int = 200
    designation_max_length: int = 100
    salary_max_chars: int = 15
    salary_max: Decimal = Decimal("9999999.99")

    model_config = {"frozen": True}


DEFAULT_POLICY = ValidationPolicy()


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _is_blank(text: str) -> bool:
    return not text.strip()


def _check_name(label: str, text: str, policy: ValidationPolicy) -> Optional[str]:
    if _is_blank(text):
        return f"{label} is required"
    if len(text) > policy.name_max_length:
        return f"{label} must be less than {policy.name_max_length} characters"
    if policy.names_letters_only and not all(ch.isalpha() or ch.isspace() for ch in text):
        return f"{label} can only contain letters"
    return None


def _check_email(text: str, policy: ValidationPolicy) -> Optional[str]:
    if _is_blank(text):
        return "Email is required" if policy.email_required else None
    if not EMAIL_PATTERN.fullmatch(text):
        return "Invalid email format"
    if len(text) > policy.email_max_length:
        return f"Email must be less than {policy.email_max_length} characters"
    return None


def _check_phone(text: str, policy: ValidationPolicy) -> Optional[str]:
    if _is_blank(text):
        return "Phone number is required" if policy.phone_required else None
    if len(text) < policy.phone_min_length:
        return f"Phone number must be at least {policy.phone_min_length} digits"
    if len(text) > policy.phone_max_length:
        return f"Phone number must be less than {policy.phone_max_length} characters"
    if not all(ch in _PHONE_CHARS for ch in text):
        return "Phone number contains invalid characters"
    return None


def _check_text(
    label: str, text: str, required: bool, max_length: int
) -> Optional[str]:
    if _is_blank(text):
        return f"{label} is required" if required else None
    if len(text) > max_length:
        return f"{label} must be less than {max_length} characters"
    return None


def parse_salary(value: Any) -> Optional[Decimal]:
    """Parse a salary value, returning None when it is not a finite number."""
    text = _text(value).strip()
    if not _NUMBER_PATTERN.fullmatch(text):
        return None
    return Decimal(text)


def _check_salary(raw: Any, policy: ValidationPolicy) -> Optional[str]:
    text = _text(raw)
    if _is_blank(text):
        return "Salary is required"
    if len(text) > policy.salary_max_chars:
        return "Salary value is too large"
    amount = parse_salary(text)
    if amount is None:
        return "Salary must be a valid number (e.g., 50000 or 50000.50)"
    if amount < 0:
        return "Salary must be a positive number"
    if amount > policy.salary_max:
        return f"Salary cannot exceed {policy.salary_max:,}"
    return None


def validate_employee_input(
    fields: EmployeeInput, policy: ValidationPolicy = DEFAULT_POLICY
) -> Dict[str, str]:
    """
    Validate raw employee input.

    Returns
    -------
    dict[str, str]
        Field name to message for every invalid field; empty when valid.
    """
    checks: Dict[str, Callable[[], Optional[str]]] = {
        "first_name": lambda: _check_name("First name", _text(fields.first_name), policy),
        "last_name": lambda: _check_name("Last name", _text(fields.last_name), policy),
        "email": lambda: _check_email(_text(fields.email), policy),
        "phone_number": lambda: _check_phone(_text(fields.phone_number), policy),
        "address": lambda: _check_text(
            "Address", _text(fields.address), policy.address_required, policy.address_max_length
        ),
        "designation": lambda: _check_text(
            "Designation",
            _text(fields.designation),
            policy.designation_required,
            policy.designation_max_length,
        ),
        "salary": lambda: _check_salary(fields.salary, policy),
    }
    errors: Dict[str, str] = {}
    for name, check in checks.items():
        message = check()
        if message is not None:
            errors[name] = message
    return errors


def employee_from_input(fields: EmployeeInput, employee_id: int = 0) -> Employee:
    """
    Build an `Employee` from input that already passed validation.

    Blank optional values are stored as None.
    """

    def optional(value: Any) -> Optional[str]:
        text = _text(value)
        return None if _is_blank(text) else text

    salary = parse_salary(fields.salary)
    if salary is None:
        raise ValueError("salary must be validated before building an employee")
    return Employee(
        id=employee_id,
        first_name=_text(fields.first_name),
        last_name=_text(fields.last_name),
        email=optional(fields.email),
        phone_number=optional(fields.phone_number),
        address=optional(fields.address),
        designation=optional(fields.designation),
        salary=salary,
    )


__all__ = [
    "DEFAULT_POLICY",
    "EMAIL_PATTERN",
    "ValidationPolicy",
    "employee_from_input",
    "parse_salary",
    "validate_employee_input",
]
