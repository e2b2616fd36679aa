"""
Storage interface for employee records.

Concrete engines (SQLite, PostgreSQL) implement the `EmployeeStore` protocol,
usually by subclassing `AbstractEmployeeStore`, which wires the live queries to
a `ChangeNotifier` so every committed write refreshes subscribers.

Engines raise `StorageError` (or a subclass) for every driver failure; the
original driver exception is chained as `__cause__` and never leaves the
service layer.
"""

from __future__ import annotations

import abc
from enum import Enum
from typing import List, Optional, Protocol, runtime_checkable

from employee_hub.domain.models import Employee
from employee_hub.infrastructure.live import ChangeNotifier, LiveQuery


class ListingOrder(str, Enum):
    """Ordering of the full employee listing."""

    FIRST_NAME = "first_name"
    NEWEST = "newest"


class StorageError(Exception):
    """Underlying storage operation failed."""


class DuplicateEmailError(StorageError):
    """The unique email constraint rejected a write."""


class MissingRecordError(StorageError):
    """An update targeted an id that is not stored."""


@runtime_checkable
class EmployeeStore(Protocol):
    """
    Persistence primitives the employee service depends on.

    The store owns identifier assignment and the persisted rows; it enforces
    no business rules beyond the schema constraints.
    """

    def observe_all(self, order: ListingOrder = ListingOrder.FIRST_NAME) -> LiveQuery[List[Employee]]:
        ...

    def observe_by_id(self, employee_id: int) -> LiveQuery[Optional[Employee]]:
        ...

    async def get_by_id(self, employee_id: int) -> Optional[Employee]:
        ...

    async def insert(self, employee: Employee) -> int:
        """Persist a new employee (its id is ignored) and return the assigned id."""
        ...

    async def update(self, employee: Employee) -> None:
        """Overwrite the stored row with `employee.id`; raises MissingRecordError if absent."""
        ...

    async def delete(self, employee: Employee) -> None:
        ...

    async def delete_by_id(self, employee_id: int) -> None:
        ...

    async def close(self) -> None:
        ...


class AbstractEmployeeStore(abc.ABC):
    """
    ABC helper for engine implementations.

    Subclasses implement the `_fetch_*` queries and the write primitives, and
    call `await self._changed()` after each committed write.
    """

    name: str = "store"

    def __init__(self) -> None:
        self._notifier = ChangeNotifier(self.name)

    @abc.abstractmethod
    async def _fetch_all(self, order: ListingOrder) -> List[Employee]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def get_by_id(self, employee_id: int) -> Optional[Employee]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def insert(self, employee: Employee) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def update(self, employee: Employee) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def delete_by_id(self, employee_id: int) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def close(self) -> None:  # pragma: no cover
        raise NotImplementedError

    def observe_all(self, order: ListingOrder = ListingOrder.FIRST_NAME) -> LiveQuery[List[Employee]]:
        order = ListingOrder(order)
        return LiveQuery(lambda: self._fetch_all(order), self._notifier)

    def observe_by_id(self, employee_id: int) -> LiveQuery[Optional[Employee]]:
        return LiveQuery(lambda: self.get_by_id(employee_id), self._notifier)

    async def delete(self, employee: Employee) -> None:
        await self.delete_by_id(employee.id)

    async def _changed(self) -> None:
        await self._notifier.notify()


__all__ = [
    "AbstractEmployeeStore",
    "DuplicateEmailError",
    "EmployeeStore",
    "ListingOrder",
    "MissingRecordError",
    "StorageError",
]
