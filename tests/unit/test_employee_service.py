from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional

import pytest

from employee_hub.domain.models import Employee, EmployeeInput
from employee_hub.domain.results import (
    Conflict,
    InvalidArgument,
    NotFound,
    Ok,
    StorageFailure,
    ValidationFailed,
    is_ok,
)
from employee_hub.domain.validation import ValidationPolicy, employee_from_input
from employee_hub.infrastructure.sqlite_store import SqliteEmployeeStore
from employee_hub.infrastructure.storage import (
    AbstractEmployeeStore,
    EmployeeStore,
    ListingOrder,
    StorageError,
)
from employee_hub.services.employee_service import EmployeeService

FIRST_ID = 1


class _RecordingStore(AbstractEmployeeStore):
    """In-memory store that records calls and can be told to fail."""

    name = "recording"

    def __init__(self, failure: Optional[Exception] = None) -> None:
        super().__init__()
        self.rows: Dict[int, Employee] = {}
        self.calls: List[str] = []
        self.failure = failure
        self._next_id = 1

    def _maybe_fail(self, call: str) -> None:
        self.calls.append(call)
        if self.failure is not None:
            raise self.failure

    async def _fetch_all(self, order: ListingOrder) -> List[Employee]:
        self._maybe_fail("fetch_all")
        return sorted(self.rows.values(), key=lambda e: (e.first_name, e.id))

    async def get_by_id(self, employee_id: int) -> Optional[Employee]:
        self._maybe_fail("get_by_id")
        return self.rows.get(employee_id)

    async def insert(self, employee: Employee) -> int:
        self._maybe_fail("insert")
        new_id = self._next_id
        self._next_id += 1
        self.rows[new_id] = employee.with_id(new_id)
        await self._changed()
        return new_id

    async def update(self, employee: Employee) -> None:
        self._maybe_fail("update")
        self.rows[employee.id] = employee
        await self._changed()

    async def delete_by_id(self, employee_id: int) -> None:
        self._maybe_fail("delete_by_id")
        self.rows.pop(employee_id, None)
        await self._changed()

    async def close(self) -> None:
        self.calls.append("close")


def test_stores_satisfy_protocol(sqlite_store: SqliteEmployeeStore) -> None:
    assert isinstance(sqlite_store, EmployeeStore)
    assert isinstance(_RecordingStore(), EmployeeStore)


@pytest.mark.asyncio
async def test_create_assigns_first_id_and_listing_shows_record(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    result = await service.create(ann_input)

    assert result == Ok(FIRST_ID)
    listing = await service.list_all().get()
    assert listing == [employee_from_input(ann_input, employee_id=FIRST_ID)]
    assert listing[0].salary == Decimal("90000")


@pytest.mark.asyncio
async def test_create_then_get_round_trips(service: EmployeeService, bob_input: EmployeeInput) -> None:
    created = await service.create(bob_input)
    assert isinstance(created, Ok)

    fetched = await service.get_by_id(created.value)

    assert isinstance(fetched, Ok)
    assert fetched.value == employee_from_input(bob_input, employee_id=created.value)
    assert fetched.value.salary == Decimal("72000.50")


@pytest.mark.asyncio
async def test_create_accepts_plain_mappings(service: EmployeeService, ann_input: EmployeeInput) -> None:
    result = await service.create(ann_input.as_dict())
    assert is_ok(result)


@pytest.mark.asyncio
async def test_blank_first_name_is_rejected_without_storage_call(ann_input: EmployeeInput) -> None:
    store = _RecordingStore()
    service = EmployeeService(store)

    result = await service.create(replace(ann_input, first_name=""))

    assert result == ValidationFailed({"first_name": "First name is required"})
    assert store.calls == []
    assert await service.list_all().get() == []


@pytest.mark.asyncio
async def test_negative_salary_is_rejected_and_nothing_persisted(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    result = await service.create(replace(ann_input, salary=-1))

    assert isinstance(result, ValidationFailed)
    assert set(result.errors) == {"salary"}
    assert "salary" in result.message
    assert await service.list_all().get() == []


@pytest.mark.asyncio
async def test_create_trims_surrounding_whitespace(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    result = await service.create(replace(ann_input, first_name="  Ann ", email=" ann@x.com "))
    assert isinstance(result, Ok)

    fetched = await service.get_by_id(result.value)
    assert isinstance(fetched, Ok)
    assert fetched.value.first_name == "Ann"
    assert fetched.value.email == "ann@x.com"


@pytest.mark.asyncio
async def test_duplicate_email_conflicts_and_keeps_first(
    service: EmployeeService, ann_input: EmployeeInput, bob_input: EmployeeInput
) -> None:
    first = await service.create(ann_input)
    second = await service.create(replace(bob_input, email=ann_input.email))

    assert isinstance(second, Conflict)
    assert await service.list_all().get() == [employee_from_input(ann_input, employee_id=first.value)]


@pytest.mark.asyncio
async def test_update_changes_fields_but_not_id(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    created = await service.create(ann_input)
    changed = replace(ann_input, designation="Manager", salary="95000.25")

    result = await service.update(created.value, changed)

    assert isinstance(result, Ok)
    assert result.value.id == created.value
    fetched = await service.get_by_id(created.value)
    assert fetched.value.designation == "Manager"
    assert fetched.value.salary == Decimal("95000.25")
    assert fetched.value.id == created.value


@pytest.mark.asyncio
async def test_update_rejects_invalid_id_and_input(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    assert isinstance(await service.update(0, ann_input), InvalidArgument)
    assert isinstance(await service.update(-4, ann_input), InvalidArgument)

    created = await service.create(ann_input)
    result = await service.update(created.value, replace(ann_input, email="nope"))
    assert result == ValidationFailed({"email": "Invalid email format"})


@pytest.mark.asyncio
async def test_update_of_missing_employee_is_not_found(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    assert isinstance(await service.update(42, ann_input), NotFound)


@pytest.mark.asyncio
async def test_update_to_taken_email_conflicts(
    service: EmployeeService, ann_input: EmployeeInput, bob_input: EmployeeInput
) -> None:
    await service.create(ann_input)
    bob = await service.create(bob_input)

    result = await service.update(bob.value, replace(bob_input, email=ann_input.email))

    assert isinstance(result, Conflict)
    fetched = await service.get_by_id(bob.value)
    assert fetched.value.email == bob_input.email


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found_and_delete_is_idempotent(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    created = await service.create(ann_input)

    assert await service.delete(created.value) == Ok(None)
    assert isinstance(await service.get_by_id(created.value), NotFound)
    assert await service.delete(created.value) == Ok(None)


@pytest.mark.asyncio
async def test_delete_by_record(service: EmployeeService, ann_input: EmployeeInput) -> None:
    created = await service.create(ann_input)
    employee = (await service.get_by_id(created.value)).value

    assert await service.delete(employee) == Ok(None)
    assert await service.list_all().get() == []


@pytest.mark.asyncio
async def test_non_positive_ids_never_reach_storage(ann_input: EmployeeInput) -> None:
    store = _RecordingStore()
    service = EmployeeService(store)
    unsaved = employee_from_input(ann_input)

    assert isinstance(await service.get_by_id(0), InvalidArgument)
    assert isinstance(await service.get_by_id(-1), InvalidArgument)
    assert isinstance(await service.delete(0), InvalidArgument)
    assert isinstance(await service.delete(unsaved), InvalidArgument)
    assert store.calls == []


@pytest.mark.asyncio
async def test_storage_errors_become_generic_failures(ann_input: EmployeeInput) -> None:
    store = _RecordingStore(failure=StorageError("disk I/O error at /var/secret/hub.db"))
    service = EmployeeService(store)

    results = [
        await service.create(ann_input),
        await service.get_by_id(1),
        await service.update(1, ann_input),
        await service.delete(1),
    ]

    for result in results:
        assert isinstance(result, StorageFailure)
        assert "secret" not in result.message
        assert "I/O" not in result.message


@pytest.mark.asyncio
async def test_unexpected_errors_propagate(ann_input: EmployeeInput) -> None:
    service = EmployeeService(_RecordingStore(failure=KeyError("bug")))
    with pytest.raises(KeyError):
        await service.create(ann_input)


@pytest.mark.asyncio
async def test_live_listing_reflects_writes_without_refresh(
    service: EmployeeService, ann_input: EmployeeInput, bob_input: EmployeeInput
) -> None:
    snapshots: List[List[str]] = []
    subscription = await service.list_all().subscribe(
        lambda employees: snapshots.append([e.first_name for e in employees])
    )

    ann = await service.create(ann_input)
    await service.create(bob_input)
    await service.create(replace(bob_input, first_name="Cy", email="cy@x.com", salary="-3"))
    await service.delete(ann.value)
    subscription.cancel()
    await service.delete(ann.value + 1)

    assert snapshots == [[], ["Ann"], ["Ann", "Bob"], ["Bob"]]


@pytest.mark.asyncio
async def test_observe_single_employee(service: EmployeeService, ann_input: EmployeeInput) -> None:
    created = await service.create(ann_input)
    seen: List[Optional[str]] = []

    await service.observe(created.value).subscribe(
        lambda employee: seen.append(employee.designation if employee else None)
    )
    await service.update(created.value, replace(ann_input, designation="Lead"))
    await service.delete(created.value)

    assert seen == ["Engineer", "Lead", None]


@pytest.mark.asyncio
async def test_listing_orders(
    sqlite_store: SqliteEmployeeStore, ann_input: EmployeeInput, bob_input: EmployeeInput
) -> None:
    by_name = EmployeeService(sqlite_store)
    newest = EmployeeService(sqlite_store, listing_order="newest")
    await by_name.create(bob_input)
    await by_name.create(ann_input)

    assert [e.first_name for e in await by_name.list_all().get()] == ["Ann", "Bob"]
    assert [e.first_name for e in await newest.list_all().get()] == ["Ann", "Bob"]
    assert [e.id for e in await newest.list_all().get()] == [2, 1]


@pytest.mark.asyncio
async def test_relaxed_policy_stores_blank_optionals_as_none(
    sqlite_store: SqliteEmployeeStore, ann_input: EmployeeInput, bob_input: EmployeeInput
) -> None:
    service = EmployeeService(sqlite_store, policy=ValidationPolicy(email_required=False))

    first = await service.create(replace(ann_input, email=""))
    second = await service.create(replace(bob_input, email="  "))

    assert isinstance(first, Ok) and isinstance(second, Ok)
    emails = [e.email for e in await service.list_all().get()]
    assert emails == [None, None]


@pytest.mark.asyncio
async def test_listing_on_closed_store_is_logged_not_raised(
    sqlite_store: SqliteEmployeeStore, caplog
) -> None:
    service = EmployeeService(sqlite_store)
    await sqlite_store.close()
    seen: List[List[Employee]] = []

    with caplog.at_level(logging.ERROR, logger="employee_hub.services.employee_service"):
        assert await service.list_all().get() == []
        await service.list_all().subscribe(seen.append)
        snapshot = await service.list_snapshot()

    assert seen == [[]]
    assert snapshot == StorageFailure("Failed to load employees. Please try again.")
    assert "Failed to list employees" in caplog.text


@pytest.mark.asyncio
async def test_read_failures_surface_as_results_or_empty_views() -> None:
    service = EmployeeService(_RecordingStore(failure=StorageError("database is locked")))

    assert isinstance(await service.list_snapshot(), StorageFailure)
    assert await service.list_all().get() == []
    assert await service.observe(1).get() is None


@pytest.mark.asyncio
async def test_list_snapshot_returns_current_listing(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    assert await service.list_snapshot() == Ok([])
    await service.create(ann_input)

    snapshot = await service.list_snapshot()

    assert isinstance(snapshot, Ok)
    assert [e.first_name for e in snapshot.value] == ["Ann"]


@pytest.mark.parametrize(
    "salary",
    ["1e-400", "1.23456789e-320", "9999999.99", "0.1", "72000.505", "1E-999"],
)
@pytest.mark.asyncio
async def test_salary_is_stored_exactly(
    service: EmployeeService, ann_input: EmployeeInput, salary: str
) -> None:
    created = await service.create(replace(ann_input, salary=salary))
    assert isinstance(created, Ok)

    fetched = await service.get_by_id(created.value)

    assert fetched.value.salary == Decimal(salary)
    assert fetched.value == employee_from_input(replace(ann_input, salary=salary), created.value)


@pytest.mark.asyncio
async def test_first_name_order_is_case_sensitive_code_point_order(
    service: EmployeeService, ann_input: EmployeeInput
) -> None:
    for index, name in enumerate(["bob", "Cy", "Ann", "ann"]):
        await service.create(replace(ann_input, first_name=name, email=f"e{index}@x.com"))

    names = [e.first_name for e in await service.list_all().get()]

    assert names == ["Ann", "Cy", "ann", "bob"]
