"""
Result contracts returned by the employee service.

Every service operation returns either `Ok` or one of the failure variants
below. Expected failures are values, not exceptions; callers branch on the
`kind` discriminator or with `isinstance`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, Literal, TypeVar, Union

T = TypeVar("T")

_FIELD_LABELS = {
    "first_name": "first name",
    "last_name": "last name",
    "email": "email",
    "phone_number": "phone number",
    "address": "address",
    "designation": "designation",
    "salary": "salary",
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    kind: Literal["ok"] = field(default="ok", init=False)


@dataclass(frozen=True)
class ValidationFailed:
    """One or more field rules were violated; storage was not touched."""

    errors: Dict[str, str]
    kind: Literal["validation_failed"] = field(default="validation_failed", init=False)

    @property
    def message(self) -> str:
        labels = ", ".join(_FIELD_LABELS.get(name, name) for name in self.errors)
        return f"Please correct the following fields: {labels}."


@dataclass(frozen=True)
class InvalidArgument:
    """A structural precondition (such as a positive id) was violated before any I/O."""

    message: str
    kind: Literal["invalid_argument"] = field(default="invalid_argument", init=False)


@dataclass(frozen=True)
class NotFound:
    message: str
    kind: Literal["not_found"] = field(default="not_found", init=False)


@dataclass(frozen=True)
class Conflict:
    """A uniqueness constraint (duplicate email) rejected the write."""

    message: str
    kind: Literal["conflict"] = field(default="conflict", init=False)


@dataclass(frozen=True)
class StorageFailure:
    """The store failed for reasons opaque to the service. Never carries driver text."""

    message: str
    kind: Literal["storage_failure"] = field(default="storage_failure", init=False)


ServiceError = Union[ValidationFailed, InvalidArgument, NotFound, Conflict, StorageFailure]
Result = Union[Ok[T], ServiceError]


def is_ok(result: "Result[T]") -> bool:
    return isinstance(result, Ok)


__all__ = [
    "Conflict",
    "InvalidArgument",
    "NotFound",
    "Ok",
    "Result",
    "ServiceError",
    "StorageFailure",
    "ValidationFailed",
    "is_ok",
]
