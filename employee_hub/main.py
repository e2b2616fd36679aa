from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, Callable, NoReturn, Optional, TypeVar

import typer

from employee_hub.config import Settings, get_settings
from employee_hub.domain.models import EmployeeInput
from employee_hub.domain.results import Ok, ServiceError, ValidationFailed
from employee_hub.infrastructure.db_factory import create_store
from employee_hub.infrastructure.storage import ListingOrder
from employee_hub.reporter import print_employee, print_employees, print_field_errors
from employee_hub.services.employee_service import EmployeeService
from employee_hub.services.messages import operation_message, user_message
from employee_hub.utils.logging import configure_logging

T = TypeVar("T")

app = typer.Typer(help="Employee Hub CLI.")


def _run(settings: Settings, action: Callable[[EmployeeService], Awaitable[T]]) -> T:
    """Open the configured store, run `action` against a service, and close the store."""

    async def runner() -> T:
        store = await create_store(settings)
        try:
            service = EmployeeService(
                store,
                policy=settings.validation_policy(),
                listing_order=settings.listing_order,
            )
            return await action(service)
        finally:
            await store.close()

    return asyncio.run(runner())


def _settings() -> Settings:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return settings


def _fail(error: ServiceError) -> NoReturn:
    if isinstance(error, ValidationFailed):
        print_field_errors(error.errors)
    typer.echo(user_message(error), err=True)
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    if settings.storage_backend == "postgres":
        location = f"{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    else:
        location = settings.sqlite_path
    policy = settings.validation_policy()
    typer.echo(
        f"storage={settings.storage_backend} ({location}) | "
        f"order={settings.listing_order} | "
        f"email_required={policy.email_required} phone_required={policy.phone_required} "
        f"address_required={policy.address_required} "
        f"designation_required={policy.designation_required}"
    )


@app.command("list")
def list_employees(
    order: Optional[ListingOrder] = typer.Option(
        None, "--order", "-o", help="Listing order (default from settings)."
    ),
) -> None:
    """
    List every employee.
    """
    settings = _settings()

    async def action(service: EmployeeService):
        if order is not None:
            service.listing_order = order
        return await service.list_snapshot()

    result = _run(settings, action)
    if not isinstance(result, Ok):
        _fail(result)
    print_employees(result.value)


@app.command()
def show(employee_id: int = typer.Argument(..., help="Employee ID.")) -> None:
    """
    Show a single employee.
    """
    settings = _settings()
    result = _run(settings, lambda service: service.get_by_id(employee_id))
    if not isinstance(result, Ok):
        _fail(result)
    print_employee(result.value)


@app.command()
def add(
    first_name: str = typer.Option("", "--first-name", "-f"),
    last_name: str = typer.Option("", "--last-name", "-l"),
    email: str = typer.Option("", "--email", "-e"),
    phone_number: str = typer.Option("", "--phone", "-p"),
    address: str = typer.Option("", "--address", "-a"),
    designation: str = typer.Option("", "--designation", "-d"),
    salary: str = typer.Option("", "--salary", "-s"),
) -> None:
    """
    Add a new employee and print its ID.
    """
    settings = _settings()
    fields = EmployeeInput(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone_number=phone_number,
        address=address,
        designation=designation,
        salary=salary,
    )
    result = _run(settings, lambda service: service.create(fields))
    if not isinstance(result, Ok):
        _fail(result)
    typer.echo(f"{operation_message(True, 'add')} id={result.value}")


@app.command()
def update(
    employee_id: int = typer.Argument(..., help="Employee ID."),
    first_name: Optional[str] = typer.Option(None, "--first-name", "-f"),
    last_name: Optional[str] = typer.Option(None, "--last-name", "-l"),
    email: Optional[str] = typer.Option(None, "--email", "-e"),
    phone_number: Optional[str] = typer.Option(None, "--phone", "-p"),
    address: Optional[str] = typer.Option(None, "--address", "-a"),
    designation: Optional[str] = typer.Option(None, "--designation", "-d"),
    salary: Optional[str] = typer.Option(None, "--salary", "-s"),
) -> None:
    """
    Update an employee. Options left out keep their stored values.
    """
    settings = _settings()
    changes = {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "phone_number": phone_number,
        "address": address,
        "designation": designation,
        "salary": salary,
    }

    async def action(service: EmployeeService):
        current = await service.get_by_id(employee_id)
        if not isinstance(current, Ok):
            return current
        merged = EmployeeInput.from_employee(current.value).as_dict()
        merged.update({key: value for key, value in changes.items() if value is not None})
        return await service.update(employee_id, merged)

    result = _run(settings, action)
    if not isinstance(result, Ok):
        _fail(result)
    typer.echo(f"{operation_message(True, 'update')} id={employee_id}")


@app.command()
def delete(employee_id: int = typer.Argument(..., help="Employee ID.")) -> None:
    """
    Delete an employee. Deleting an unknown ID is not an error.
    """
    settings = _settings()
    result = _run(settings, lambda service: service.delete(employee_id))
    if not isinstance(result, Ok):
        _fail(result)
    typer.echo(f"{operation_message(True, 'delete')} id={employee_id}")


@app.command()
def watch(
    count: Optional[int] = typer.Option(
        None, "--count", "-n", help="Stop after this many snapshots (default: run until Ctrl-C)."
    ),
) -> None:
    """
    Print the employee listing now and again after every change.
    """
    settings = _settings()

    async def action(service: EmployeeService) -> None:
        seen = 0
        snapshots = service.list_all().stream()
        try:
            async for employees in snapshots:
                seen += 1
                print_employees(employees, title=f"Employees (update {seen})")
                if count is not None and seen >= count:
                    break
        finally:
            await snapshots.aclose()

    _run(settings, action)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
