"""Employee commands."""

from decimal import Decimal

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.domain.documents import EmployeeService
from kwanza.domain.entities import EmployeeStatus, HrTransactionType
from kwanza.domain.errors import DomainError
from kwanza.utils.amount_parser import parse_amount
from kwanza.utils.date_parser import parse_date

TRANSACTION_TYPES = [t.value for t in HrTransactionType]
STATUSES = [s.value for s in EmployeeStatus]


def _amount(value: str | None) -> Decimal:
    return parse_amount(value) if value else Decimal("0")


@click.group()
def employee_group():
    """Manage employees and their monthly variations."""
    pass


@employee_group.command("create")
@click.argument("name")
@click.argument("base_salary")
@click.option("--role", default="", help="Job title")
@click.option("--nif", help="Employee NIF")
@click.option("--transport", help="Monthly transport subsidy")
@click.option("--food", help="Monthly food subsidy")
@click.option("--family", help="Monthly family subsidy")
@click.option("--housing", help="Monthly housing subsidy")
@click.pass_context
def create_employee(
    ctx,
    name: str,
    base_salary: str,
    role: str,
    nif: str | None,
    transport: str | None,
    food: str | None,
    family: str | None,
    housing: str | None,
):
    """Create an employee.

    Example:
        kwanza employee create "Ana Silva" 150000 --role Contabilista --transport 10000
    """
    service = EmployeeService(ctx.obj["db"])
    try:
        employee_id = service.create_employee(
            name=name,
            base_salary=parse_amount(base_salary),
            role=role,
            nif=nif,
            subsidy_transport=_amount(transport),
            subsidy_food=_amount(food),
            subsidy_family=_amount(family),
            subsidy_housing=_amount(housing),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created employee '{name}' (ID: {employee_id})")


@employee_group.command("list")
@click.option("--status", type=click.Choice(STATUSES), help="Filter by status")
@click.pass_context
def list_employees(ctx, status: str | None):
    """List employees."""
    service = EmployeeService(ctx.obj["db"])
    employees = service.list_employees(status=EmployeeStatus(status) if status else None)
    if not employees:
        click.echo("No employees found.")
        return

    for emp in employees:
        click.echo(
            f"ID: {emp.id:3d} | {emp.name[:25]:25s} | {emp.role[:20]:20s} | "
            f"{emp.base_salary:>12,.2f} | subs {emp.total_subsidies:>10,.2f} | {emp.status.value}"
        )


@employee_group.command("status")
@click.argument("employee_id", type=int)
@click.argument("status", type=click.Choice(STATUSES))
@click.pass_context
def set_status(ctx, employee_id: int, status: str):
    """Change an employee's status."""
    service = EmployeeService(ctx.obj["db"])
    try:
        service.set_status(employee_id, EmployeeStatus(status))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Employee {employee_id} is now {status}")


@employee_group.command("transaction")
@click.argument("employee_id", type=int)
@click.argument("transaction_type", metavar="TYPE", type=click.Choice(TRANSACTION_TYPES, case_sensitive=False))
@click.argument("amount")
@click.option("--date", "date_str", default="today", show_default=True, help="Transaction date")
@click.option("--description", help="Free text")
@click.pass_context
def record_transaction(
    ctx, employee_id: int, transaction_type: str, amount: str, date_str: str, description: str | None
):
    """Record a bonus, allowance, absence or advance.

    Example:
        kwanza employee transaction 1 ADVANCE 20000 --date 2024-03-10
    """
    service = EmployeeService(ctx.obj["db"])
    try:
        transaction_id = service.record_transaction(
            employee_id=employee_id,
            date=parse_date(date_str),
            transaction_type=HrTransactionType(transaction_type.upper()),
            amount=parse_amount(amount),
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Recorded {transaction_type.upper()} of {parse_amount(amount):,.2f} (ID: {transaction_id})")


def register_commands(cli):
    """Register employee commands with main CLI."""
    cli.add_command(employee_group, name="employee")
