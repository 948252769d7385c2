"""VAT settlement commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.cli.parsing import period_argument
from kwanza.domain.entities import VatCalculation
from kwanza.domain.vat import VatSettlementService
from kwanza.utils.amount_parser import parse_amount
from kwanza.utils.excel_export import export_vat_history


def _adjust_options(f):
    f = click.option("--purchase-adjust", default="0", help="Regularization on the deductible side")(f)
    f = click.option("--sales-adjust", default="0", help="Regularization on the liquidated side")(f)
    return click.argument("period", callback=period_argument)(f)


def _echo_calculation(calc: VatCalculation) -> None:
    click.echo(f"Apuramento do IVA {calc.month:02d}/{calc.year}")
    click.echo(f"  IVA liquidado ({calc.invoice_count} doc.):  {calc.iva_liquidado:>14,.2f}")
    click.echo(f"  Regularização vendas:        {calc.sales_adjust:>14,.2f}")
    click.echo(f"  IVA dedutível ({calc.purchase_count} doc.):  {calc.iva_dedutivel:>14,.2f}")
    click.echo(f"  Regularização compras:       {calc.purchase_adjust:>14,.2f}")
    click.echo(f"  Saldo:                       {calc.balance:>14,.2f}  ({calc.position.value})")


@click.group()
def vat_group():
    """Monthly VAT settlement (apuramento do IVA)."""
    pass


@vat_group.command("calculate")
@_adjust_options
@click.pass_context
def calculate(ctx, period: tuple[int, int], sales_adjust: str, purchase_adjust: str):
    """Compute the VAT position of PERIOD (YYYY-MM) without saving it."""
    year, month = period
    service = VatSettlementService(ctx.obj["db"])
    try:
        calc = service.calculate(year, month, parse_amount(sales_adjust), parse_amount(purchase_adjust))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    _echo_calculation(calc)


@vat_group.command("register")
@_adjust_options
@click.pass_context
def register(ctx, period: tuple[int, int], sales_adjust: str, purchase_adjust: str):
    """Register the settlement of PERIOD (YYYY-MM). Cannot be undone."""
    year, month = period
    service = VatSettlementService(ctx.obj["db"])
    try:
        settlement = service.register(year, month, parse_amount(sales_adjust), parse_amount(purchase_adjust))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(
        f"Registered VAT settlement {month:02d}/{year}: {settlement.balance:,.2f} ({settlement.position.value})"
    )


@vat_group.command("history")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the history to an .xlsx file")
@click.pass_context
def history(ctx, export_path: str | None):
    """List registered settlements."""
    service = VatSettlementService(ctx.obj["db"])
    settlements = service.history()

    if not settlements:
        click.echo("No VAT settlements registered.")
        return
    for s in settlements:
        click.echo(
            f"{s.month:02d}/{s.year} | debit {s.total_debit:>14,.2f} | credit {s.total_credit:>14,.2f} | "
            f"{s.balance:>14,.2f} | {s.position.value:11s} | {s.processed_at:%Y-%m-%d}"
        )
    if export_path:
        export_vat_history(settlements, export_path)
        click.echo(f"Exported to {export_path}")


def register_commands(cli):
    """Register VAT commands with main CLI."""
    cli.add_command(vat_group, name="vat")
