"""Supplier document commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.cli.parsing import parse_item_spec
from kwanza.domain.documents import PurchaseService
from kwanza.domain.entities import PurchaseType
from kwanza.domain.errors import DomainError
from kwanza.utils.date_parser import parse_date

PURCHASE_TYPES = [t.value for t in PurchaseType]


@click.group()
def purchase_group():
    """Manage supplier documents."""
    pass


@purchase_group.command("create")
@click.argument("purchase_type", metavar="TYPE", type=click.Choice(PURCHASE_TYPES, case_sensitive=False))
@click.argument("document_number")
@click.option("--date", "date_str", default="today", show_default=True, help="Document date")
@click.option("--supplier", "supplier_name", required=True, help="Supplier name")
@click.option("--nif", help="Supplier NIF")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Line as DESC|QTY|PRICE[|TAX%||RUBRICA|DISCOUNT%] (repeatable)",
)
@click.option("--paid", is_flag=True, help="Mark the purchase paid right away")
@click.pass_context
def create_purchase(
    ctx,
    purchase_type: str,
    document_number: str,
    date_str: str,
    supplier_name: str,
    nif: str | None,
    items: tuple[str, ...],
    paid: bool,
):
    """Register a supplier document.

    Example:
        kwanza purchase create FT "F-889" --supplier "Fornecedor X" --item "Papel|10|500|14" --paid
    """
    service = PurchaseService(ctx.obj["db"])
    try:
        purchase_id = service.create_purchase(
            purchase_type=PurchaseType(purchase_type.upper()),
            document_number=document_number,
            date=parse_date(date_str),
            supplier_name=supplier_name,
            items=[parse_item_spec(item) for item in items],
            supplier_nif=nif,
        )
        if paid:
            service.mark_paid(purchase_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    purchase = service.get_purchase(purchase_id)
    click.echo(f"Created purchase {purchase.document_number} (ID: {purchase_id})")
    click.echo(
        f"  Subtotal: {purchase.subtotal:,.2f}  IVA: {purchase.tax_amount:,.2f}  Total: {purchase.total:,.2f}"
    )


@purchase_group.command("pay")
@click.argument("purchase_id", type=int)
@click.pass_context
def pay_purchase(ctx, purchase_id: int):
    """Mark a purchase paid."""
    service = PurchaseService(ctx.obj["db"])
    try:
        service.mark_paid(purchase_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Purchase {purchase_id} marked paid")


@purchase_group.command("cancel")
@click.argument("purchase_id", type=int)
@click.pass_context
def cancel_purchase(ctx, purchase_id: int):
    """Cancel a purchase."""
    service = PurchaseService(ctx.obj["db"])
    try:
        service.cancel_purchase(purchase_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Cancelled purchase {purchase_id}")


@purchase_group.command("rubrica")
@click.argument("purchase_id", type=int)
@click.argument("item_id", type=int)
@click.argument("code")
@click.pass_context
def set_rubrica(ctx, purchase_id: int, item_id: int, code: str):
    """Set the cost account of a purchase item."""
    service = PurchaseService(ctx.obj["db"])
    try:
        service.assign_rubrica(purchase_id, item_id, code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Item {item_id} of purchase {purchase_id} -> {code}")


@purchase_group.command("list")
@click.option("--year", type=int, help="Only documents of this year")
@click.option("--month", type=click.IntRange(1, 12), help="Only documents of this month (needs --year)")
@click.pass_context
def list_purchases(ctx, year: int | None, month: int | None):
    """List supplier documents."""
    if month is not None and year is None:
        click.echo("Error: --month requires --year", err=True)
        ctx.exit(1)

    service = PurchaseService(ctx.obj["db"])
    purchases = service.list_purchases(year=year, month=month)
    if not purchases:
        click.echo("No purchases found.")
        return

    for p in purchases:
        click.echo(
            f"ID: {p.id:4d} | {p.date.isoformat()} | {p.purchase_type.value:3s} {p.document_number:15s} | "
            f"{p.supplier_name[:25]:25s} | {p.total:>14,.2f} | {p.status.value}"
        )


def register_commands(cli):
    """Register purchase commands with main CLI."""
    cli.add_command(purchase_group, name="purchase")
