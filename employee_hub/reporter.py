from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from employee_hub.domain.models import Employee


def format_salary(salary: Decimal) -> str:
    return f"{salary:,.2f}"


def build_employee_table(employees: List[Employee], title: str = "Employees") -> Table:
    """
    Build a rich table listing employees in the order given.
    """
    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"{len(employees)} employee(s)",
    )

    table.add_column("ID", justify="right", style="magenta", no_wrap=True)
    table.add_column("", style="bold cyan", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="blue")
    table.add_column("Phone", style="white")
    table.add_column("Designation", style="green")
    table.add_column("Salary", justify="right", style="bold green")

    for employee in employees:
        table.add_row(
            str(employee.id),
            employee.initials,
            employee.full_name,
            employee.email or "-",
            employee.phone_number or "-",
            employee.designation or "-",
            format_salary(employee.salary),
        )
    return table


def print_employees(
    employees: List[Employee], console: Optional[Console] = None, title: str = "Employees"
) -> None:
    """Render employees as a rich table, or a notice when there are none."""
    console = console or Console()

    if not employees:
        console.print("[yellow]No employees found.[/yellow]")
        return

    console.print(build_employee_table(employees, title=title))


def print_employee(employee: Employee, console: Optional[Console] = None) -> None:
    """Render a single employee as a two-column detail table."""
    console = console or Console()

    details: Dict[str, str] = {
        "ID": str(employee.id),
        "Name": employee.full_name,
        "Email": employee.email or "-",
        "Phone": employee.phone_number or "-",
        "Address": employee.address or "-",
        "Designation": employee.designation or "-",
        "Salary": format_salary(employee.salary),
    }
    table = Table(title=f"{employee.initials} · {employee.full_name}", box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    for label, value in details.items():
        table.add_row(label, value)
    console.print(table)


def print_field_errors(errors: Dict[str, str], console: Optional[Console] = None) -> None:
    console = console or Console(stderr=True)
    for field_name, message in errors.items():
        console.print(f"[red]{field_name}[/red]: {message}")


__all__ = [
    "build_employee_table",
    "format_salary",
    "print_employee",
    "print_employees",
    "print_field_errors",
]
