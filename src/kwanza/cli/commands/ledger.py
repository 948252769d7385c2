"""Opening balance, account extract and balancete commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.cli.parsing import parse_opening_row
from kwanza.domain.errors import DomainError
from kwanza.domain.ledger import LedgerService
from kwanza.utils.excel_export import export_account_extract, export_trial_balance


@click.group()
def opening_group():
    """Manage opening balances (saldos iniciais)."""
    pass


@opening_group.command("show")
@click.argument("year", type=int)
@click.pass_context
def show_opening(ctx, year: int):
    """Show the opening balances of YEAR."""
    service = LedgerService(ctx.obj["db"])
    balances = service.list_opening_balances(year)
    if not balances:
        click.echo(f"No opening balances for {year}.")
        return

    total_debit = sum(ob.debit for ob in balances)
    total_credit = sum(ob.credit for ob in balances)
    for ob in balances:
        click.echo(
            f"{ob.account_code:15s} | {ob.description[:35]:35s} | {ob.debit:>14,.2f} | {ob.credit:>14,.2f} | "
            f"{ob.balance_type.value}"
        )
    click.echo("-" * 95)
    click.echo(f"{'TOTAL':15s} | {'':35s} | {total_debit:>14,.2f} | {total_credit:>14,.2f}")


@opening_group.command("set")
@click.argument("year", type=int)
@click.option("--row", "rows", multiple=True, required=True, help="CODE|DESC|DEBIT|CREDIT (repeatable)")
@click.pass_context
def set_opening(ctx, year: int, rows: tuple[str, ...]):
    """Replace the opening balances of YEAR.

    The map is rejected unless total debit equals total credit.

    Example:
        kwanza opening set 2024 --row "43.1|Banco BAI|500000|" --row "51|Capital||500000"
    """
    service = LedgerService(ctx.obj["db"])
    try:
        count = service.save_opening_balances(year, [parse_opening_row(row) for row in rows])
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Saved {count} opening balance(s) for {year}")


@click.command("extract")
@click.argument("code")
@click.option("--year", type=int, required=True, help="Fiscal year")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the extract to an .xlsx file")
@click.pass_context
def extract(ctx, code: str, year: int, export_path: str | None):
    """Show the movements of account CODE (and sub-accounts) in a year."""
    service = LedgerService(ctx.obj["db"])
    try:
        result = service.account_extract(code, year)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Extrato {result.account_code} {result.description} ({year})")
    if not result.rows:
        click.echo("No movements.")
    for row in result.rows:
        click.echo(
            f"{row.date.isoformat() if row.date else '':10s} | {row.diary:4s} | {row.doc_number[:14]:14s} | "
            f"{row.account_code:14s} | {row.description[:30]:30s} | {row.debit:>13,.2f} | {row.credit:>13,.2f} | "
            f"{row.balance:>14,.2f}"
        )
    click.echo(f"Total debit {result.total_debit:,.2f} | credit {result.total_credit:,.2f} | balance {result.balance:,.2f}")
    if export_path:
        export_account_extract(result, export_path)
        click.echo(f"Exported to {export_path}")


@click.command("balancete")
@click.option("--year", type=int, required=True, help="Fiscal year")
@click.option("--start-month", type=click.IntRange(1, 12), default=1, show_default=True)
@click.option("--end-month", type=click.IntRange(1, 12), default=12, show_default=True)
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the balancete to an .xlsx file")
@click.pass_context
def balancete(ctx, year: int, start_month: int, end_month: int, export_path: str | None):
    """Show the trial balance for a range of months."""
    service = LedgerService(ctx.obj["db"])
    try:
        result = service.trial_balance(year, start_month, end_month)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not result.rows:
        click.echo("No balances or movements in the period.")
        return

    click.echo(
        f"{'Conta':18s} | {'Descrição':30s} | {'Débito':>14s} | {'Crédito':>14s} | "
        f"{'Saldo Dev.':>14s} | {'Saldo Cred.':>14s}"
    )
    click.echo("-" * 120)
    for row in result.rows:
        code = f"{'  ' * row.level}{row.code}"
        click.echo(
            f"{code:18s} | {row.description[:30]:30s} | {row.opening_debit + row.debit:>14,.2f} | "
            f"{row.opening_credit + row.credit:>14,.2f} | {row.balance_debit:>14,.2f} | {row.balance_credit:>14,.2f}"
        )
    click.echo("-" * 120)
    click.echo(
        f"{'TOTAL (período)':18s} | {'':30s} | {result.total_debit:>14,.2f} | {result.total_credit:>14,.2f} | "
        f"{result.total_balance_debit:>14,.2f} | {result.total_balance_credit:>14,.2f}"
    )
    if export_path:
        export_trial_balance(result, export_path)
        click.echo(f"Exported to {export_path}")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(opening_group, name="opening")
    cli.add_command(extract)
    cli.add_command(balancete)
