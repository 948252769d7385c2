"""Payroll commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.cli.parsing import period_argument
from kwanza.domain.entities import SalarySlip
from kwanza.domain.errors import DomainError
from kwanza.domain.payroll import PayrollService
from kwanza.utils.excel_export import export_salary_map


def _echo_slips(slips: list[SalarySlip] | tuple[SalarySlip, ...]) -> None:
    click.echo(
        f"{'Employee':25s} | {'Gross':>12s} | {'Subsidies':>10s} | {'INSS':>10s} | "
        f"{'IRT':>10s} | {'Advances':>10s} | {'Net':>12s}"
    )
    click.echo("-" * 105)
    for slip in slips:
        click.echo(
            f"{slip.employee_name[:25]:25s} | {slip.gross_total:>12,.2f} | {slip.subsidies:>10,.2f} | "
            f"{slip.inss:>10,.2f} | {slip.irt:>10,.2f} | {slip.advances:>10,.2f} | {slip.net_total:>12,.2f}"
        )


@click.group()
def payroll_group():
    """Compute and certify monthly payroll."""
    pass


@payroll_group.command("preview")
@click.argument("period", callback=period_argument)
@click.pass_context
def preview(ctx, period: tuple[int, int]):
    """Show the slips of PERIOD (YYYY-MM) without saving anything."""
    year, month = period
    service = PayrollService(ctx.obj["db"])
    slips = service.preview_payroll(year, month)
    if not slips:
        click.echo("No active employees.")
        return
    _echo_slips(slips)


@payroll_group.command("certify")
@click.argument("period", callback=period_argument)
@click.pass_context
def certify(ctx, period: tuple[int, int]):
    """Certify the payroll of PERIOD (YYYY-MM)."""
    year, month = period
    service = PayrollService(ctx.obj["db"])
    try:
        run = service.certify_payroll(year, month)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Certified payroll {month:02d}/{year} with {len(run.slips)} slip(s)")


@payroll_group.command("map")
@click.argument("period", callback=period_argument)
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the map to an .xlsx file")
@click.pass_context
def salary_map(ctx, period: tuple[int, int], export_path: str | None):
    """Show the salary map of a certified PERIOD (YYYY-MM)."""
    year, month = period
    service = PayrollService(ctx.obj["db"])
    try:
        result = service.salary_map(year, month)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _echo_slips(result.slips)
    click.echo("-" * 105)
    totals = result.totals
    click.echo(
        f"{'TOTAL':25s} | {totals['gross_total']:>12,.2f} | {totals['subsidies']:>10,.2f} | "
        f"{totals['inss']:>10,.2f} | {totals['irt']:>10,.2f} | {totals['advances']:>10,.2f} | "
        f"{totals['net_total']:>12,.2f}"
    )
    click.echo(f"Employer INSS (8%): {totals['inss_employer']:,.2f}")
    if export_path:
        export_salary_map(result, export_path)
        click.echo(f"Exported to {export_path}")


@payroll_group.command("runs")
@click.pass_context
def list_runs(ctx):
    """List certified payroll runs."""
    service = PayrollService(ctx.obj["db"])
    runs = service.list_runs()
    if not runs:
        click.echo("No certified payroll runs.")
        return
    for run in runs:
        net = sum(slip.net_total for slip in run.slips)
        click.echo(
            f"ID: {run.id:3d} | {run.month:02d}/{run.year} | {len(run.slips):3d} slip(s) | net {net:>14,.2f} | "
            f"certified {run.certified_at:%Y-%m-%d %H:%M}"
        )


def register_commands(cli):
    """Register payroll commands with main CLI."""
    cli.add_command(payroll_group, name="payroll")
