"""
PostgreSQL storage engine.

Uses a psycopg `AsyncConnectionPool`; each operation borrows a connection for
one statement, and the pool commits on successful exit of the connection
context (rolls back on error).
"""

from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

import psycopg
from psycopg import errors as pg_errors
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from employee_hub.domain.models import Employee
from employee_hub.infrastructure.storage import (
    AbstractEmployeeStore,
    DuplicateEmailError,
    ListingOrder,
    MissingRecordError,
    StorageError,
)
from employee_hub.utils.logging import get_logger

log = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS public.employees (
    id BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    email TEXT UNIQUE,
    phone_number TEXT,
    address TEXT,
    designation TEXT,
    salary NUMERIC NOT NULL DEFAULT 0 CHECK (salary >= 0)
);
"""

_ORDER_BY = {
    ListingOrder.FIRST_NAME: 'first_name COLLATE "C" ASC, id ASC',
    ListingOrder.NEWEST: "id DESC",
}

_COLUMNS = "id, first_name, last_name, email, phone_number, address, designation, salary"


def _row_to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        id=int(row["id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone_number=row["phone_number"],
        address=row["address"],
        designation=row["designation"],
        salary=Decimal(row["salary"]),
    )


def _params(employee: Employee) -> tuple[Any, ...]:
    return (
        employee.first_name,
        employee.last_name,
        employee.email,
        employee.phone_number,
        employee.address,
        employee.designation,
        employee.salary,
    )


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise psycopg failures as storage errors, keeping the cause chained."""
    try:
        yield
    except pg_errors.UniqueViolation as exc:
        raise DuplicateEmailError("An employee with this email already exists") from exc
    except psycopg.Error as exc:
        raise StorageError(f"Failed to {operation}") from exc


class PostgresEmployeeStore(AbstractEmployeeStore):
    """
    Employee store backed by a PostgreSQL server.

    The pool is opened by `employee_hub.infrastructure.db_factory` and handed
    in; the store closes it in `close()`.
    """

    name: str = "postgres"

    def __init__(self, pool: AsyncConnectionPool) -> None:
        super().__init__()
        self._pool = pool

    async def initialize(self) -> None:
        """Create the schema if it does not exist yet."""
        with _translate_errors("initialize schema"):
            async with self._pool.connection() as conn:
                await conn.execute(SCHEMA)

    async def _fetch_all(self, order: ListingOrder) -> List[Employee]:
        with _translate_errors("fetch employees"):
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        f"SELECT {_COLUMNS} FROM public.employees ORDER BY {_ORDER_BY[order]}"
                    )
                    rows = await cur.fetchall()
        return [_row_to_employee(row) for row in rows]

    async def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with _translate_errors("fetch employee"):
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        f"SELECT {_COLUMNS} FROM public.employees WHERE id = %s LIMIT 1",
                        (employee_id,),
                    )
                    row = await cur.fetchone()
        return _row_to_employee(row) if row is not None else None

    async def insert(self, employee: Employee) -> int:
        with _translate_errors("insert employee"):
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO public.employees
                            (first_name, last_name, email, phone_number, address, designation, salary)
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        RETURNING id
                        """,
                        _params(employee),
                    )
                    (new_id,) = await cur.fetchone()
        log.debug("Inserted employee row", extra={"employee_id": new_id, "store": self.name})
        await self._changed()
        return int(new_id)

    async def update(self, employee: Employee) -> None:
        with _translate_errors("update employee"):
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        UPDATE public.employees
                        SET first_name = %s, last_name = %s, email = %s, phone_number = %s,
                            address = %s, designation = %s, salary = %s
                        WHERE id = %s
                        """,
                        (*_params(employee), employee.id),
                    )
                    updated = cur.rowcount
        if updated == 0:
            raise MissingRecordError(f"Employee {employee.id} does not exist")
        log.debug("Updated employee row", extra={"employee_id": employee.id, "store": self.name})
        await self._changed()

    async def delete_by_id(self, employee_id: int) -> None:
        with _translate_errors("delete employee"):
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        "DELETE FROM public.employees WHERE id = %s", (employee_id,)
                    )
                    removed = cur.rowcount
        if removed:
            log.debug("Deleted employee row", extra={"employee_id": employee_id, "store": self.name})
            await self._changed()

    async def close(self) -> None:
        await self._pool.close()


__all__ = ["SCHEMA", "PostgresEmployeeStore"]
