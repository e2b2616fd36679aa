"""
SQLite storage engine (default).

A single `sqlite3` connection is shared by all operations and serialized by a
lock; each call runs in a worker thread via `asyncio.to_thread` so the event
loop never blocks on disk I/O. All statements are parameterized. Salaries are
kept as decimal text so they read back exactly.
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Callable, Iterator, List, Optional, TypeVar

from employee_hub.domain.models import Employee
from employee_hub.infrastructure.storage import (
    AbstractEmployeeStore,
    DuplicateEmailError,
    ListingOrder,
    MissingRecordError,
    StorageError,
)
from employee_hub.utils.logging import get_logger

R = TypeVar("R")

log = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS employees (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    email TEXT UNIQUE,
    phone_number TEXT,
    address TEXT,
    designation TEXT,
    salary TEXT NOT NULL DEFAULT '0'
);
"""

_ORDER_BY = {
    ListingOrder.FIRST_NAME: "first_name COLLATE BINARY ASC, id ASC",
    ListingOrder.NEWEST: "id DESC",
}

_COLUMNS = "id, first_name, last_name, email, phone_number, address, designation, salary"


def _row_to_employee(row: sqlite3.Row) -> Employee:
    return Employee(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone_number=row["phone_number"],
        address=row["address"],
        designation=row["designation"],
        salary=Decimal(str(row["salary"])),
    )


def _params(employee: Employee) -> tuple[Any, ...]:
    return (
        employee.first_name,
        employee.last_name,
        employee.email,
        employee.phone_number,
        employee.address,
        employee.designation,
        str(employee.salary),
    )


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise sqlite3 failures as storage errors, keeping the cause chained."""
    try:
        yield
    except sqlite3.IntegrityError as exc:
        if "UNIQUE" in str(exc) and "email" in str(exc):
            raise DuplicateEmailError("An employee with this email already exists") from exc
        raise StorageError(f"Failed to {operation}") from exc
    except sqlite3.Error as exc:
        raise StorageError(f"Failed to {operation}") from exc


class SqliteEmployeeStore(AbstractEmployeeStore):
    """
    Employee store backed by an embedded SQLite database.

    The connection is created by `employee_hub.infrastructure.db_factory` and
    handed in; the store owns it from then on and closes it in `close()`.
    """

    name: str = "sqlite"

    def __init__(self, connection: sqlite3.Connection) -> None:
        super().__init__()
        self._conn = connection
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._closed = False

    def initialize(self) -> None:
        """Create the schema if it does not exist yet."""
        with self._lock, _translate_errors("initialize schema"):
            self._conn.executescript(SCHEMA)
            self._conn.commit()

    async def _run(self, fn: Callable[..., R], *args: Any) -> R:
        return await asyncio.to_thread(self._locked, fn, *args)

    def _locked(self, fn: Callable[..., R], *args: Any) -> R:
        with self._lock:
            if self._closed:
                raise StorageError("Store is closed")
            return fn(*args)

    # Queries

    def _select_all(self, order: ListingOrder) -> List[Employee]:
        with _translate_errors("fetch employees"):
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM employees ORDER BY {_ORDER_BY[order]}"
            ).fetchall()
        return [_row_to_employee(row) for row in rows]

    def _select_one(self, employee_id: int) -> Optional[Employee]:
        with _translate_errors("fetch employee"):
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE id = ? LIMIT 1",
                (employee_id,),
            ).fetchone()
        return _row_to_employee(row) if row is not None else None

    async def _fetch_all(self, order: ListingOrder) -> List[Employee]:
        return await self._run(self._select_all, order)

    async def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return await self._run(self._select_one, employee_id)

    # Writes

    def _insert(self, employee: Employee) -> int:
        with _translate_errors("insert employee"), self._conn:
            cursor = self._conn.execute(
                """
                INSERT INTO employees
                    (first_name, last_name, email, phone_number, address, designation, salary)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                _params(employee),
            )
        return int(cursor.lastrowid)

    def _update(self, employee: Employee) -> None:
        with _translate_errors("update employee"), self._conn:
            cursor = self._conn.execute(
                """
                UPDATE employees
                SET first_name = ?, last_name = ?, email = ?, phone_number = ?,
                    address = ?, designation = ?, salary = ?
                WHERE id = ?
                """,
                (*_params(employee), employee.id),
            )
        if cursor.rowcount == 0:
            raise MissingRecordError(f"Employee {employee.id} does not exist")

    def _delete(self, employee_id: int) -> int:
        with _translate_errors("delete employee"), self._conn:
            cursor = self._conn.execute("DELETE FROM employees WHERE id = ?", (employee_id,))
        return cursor.rowcount

    async def insert(self, employee: Employee) -> int:
        new_id = await self._run(self._insert, employee)
        log.debug("Inserted employee row", extra={"employee_id": new_id, "store": self.name})
        await self._changed()
        return new_id

    async def update(self, employee: Employee) -> None:
        await self._run(self._update, employee)
        log.debug("Updated employee row", extra={"employee_id": employee.id, "store": self.name})
        await self._changed()

    async def delete_by_id(self, employee_id: int) -> None:
        removed = await self._run(self._delete, employee_id)
        if removed:
            log.debug("Deleted employee row", extra={"employee_id": employee_id, "store": self.name})
            await self._changed()

    async def close(self) -> None:
        def _close() -> None:
            with self._lock:
                if not self._closed:
                    self._closed = True
                    self._conn.close()

        await asyncio.to_thread(_close)


__all__ = ["SCHEMA", "SqliteEmployeeStore"]
