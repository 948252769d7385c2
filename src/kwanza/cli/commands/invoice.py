"""Sales document commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.cli.parsing import parse_item_spec
from kwanza.domain.documents import InvoiceService
from kwanza.domain.entities import InvoiceType
from kwanza.domain.errors import DomainError
from kwanza.utils.date_parser import parse_date

INVOICE_TYPES = [t.value for t in InvoiceType]


@click.group()
def invoice_group():
    """Manage sales documents (FT, FR, NC, ...)."""
    pass


@invoice_group.command("create")
@click.argument("invoice_type", metavar="TYPE", type=click.Choice(INVOICE_TYPES, case_sensitive=False))
@click.argument("number")
@click.option("--date", "date_str", default="today", show_default=True, help="Document date")
@click.option("--client", "client_name", required=True, help="Client name")
@click.option("--client-code", help="Client code (e.g. C001)")
@click.option("--nif", help="Client NIF")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Line as DESC|QTY|PRICE[|TAX%|PRODUCT/SERVICE|RUBRICA|DISCOUNT%] (repeatable)",
)
@click.option("--certify", is_flag=True, help="Certify the document right away")
@click.pass_context
def create_invoice(
    ctx,
    invoice_type: str,
    number: str,
    date_str: str,
    client_name: str,
    client_code: str | None,
    nif: str | None,
    items: tuple[str, ...],
    certify: bool,
):
    """Create a sales document.

    Examples:
        kwanza invoice create FT "FT 2024/1" --client "Cliente A" --client-code C001 \\
            --item "Consultoria|1|10000|14|SERVICE" --certify
    """
    service = InvoiceService(ctx.obj["db"])
    try:
        doc_date = parse_date(date_str)
        item_inputs = [parse_item_spec(item) for item in items]
        invoice_id = service.create_invoice(
            invoice_type=InvoiceType(invoice_type.upper()),
            number=number,
            date=doc_date,
            client_name=client_name,
            items=item_inputs,
            client_code=client_code,
            client_nif=nif,
        )
        if certify:
            service.certify_invoice(invoice_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    invoice = service.get_invoice(invoice_id)
    click.echo(f"Created {invoice.invoice_type.value} {invoice.number} (ID: {invoice_id})")
    click.echo(f"  Subtotal: {invoice.subtotal:,.2f}  IVA: {invoice.tax_amount:,.2f}  Total: {invoice.total:,.2f}")
    if certify:
        click.echo("  Certified")


@invoice_group.command("certify")
@click.argument("invoice_id", type=int)
@click.pass_context
def certify_invoice(ctx, invoice_id: int):
    """Certify a document so it reaches the ledger and VAT."""
    service = InvoiceService(ctx.obj["db"])
    try:
        service.certify_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Certified invoice {invoice_id}")


@invoice_group.command("cancel")
@click.argument("invoice_id", type=int)
@click.pass_context
def cancel_invoice(ctx, invoice_id: int):
    """Cancel a document."""
    service = InvoiceService(ctx.obj["db"])
    try:
        service.cancel_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Cancelled invoice {invoice_id}")


@invoice_group.command("rubrica")
@click.argument("invoice_id", type=int)
@click.argument("item_id", type=int)
@click.argument("code")
@click.pass_context
def set_rubrica(ctx, invoice_id: int, item_id: int, code: str):
    """Set the revenue account of an invoice item."""
    service = InvoiceService(ctx.obj["db"])
    try:
        service.assign_rubrica(invoice_id, item_id, code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Item {item_id} of invoice {invoice_id} -> {code}")


@invoice_group.command("list")
@click.option("--year", type=int, help="Only documents of this year")
@click.option("--month", type=click.IntRange(1, 12), help="Only documents of this month (needs --year)")
@click.option("--items", "show_items", is_flag=True, help="Show document lines")
@click.pass_context
def list_invoices(ctx, year: int | None, month: int | None, show_items: bool):
    """List sales documents."""
    if month is not None and year is None:
        click.echo("Error: --month requires --year", err=True)
        ctx.exit(1)

    service = InvoiceService(ctx.obj["db"])
    invoices = service.list_invoices(year=year, month=month)
    if not invoices:
        click.echo("No invoices found.")
        return

    for inv in invoices:
        flag = "C" if inv.is_certified else " "
        click.echo(
            f"ID: {inv.id:4d} | {inv.date.isoformat()} | {inv.invoice_type.value:2s} {inv.number:15s} | "
            f"{inv.client_name[:25]:25s} | {inv.total:>14,.2f} | {inv.status.value:9s} {flag}"
        )
        if show_items:
            for item in inv.items:
                click.echo(
                    f"      #{item.id:<4d} {item.description[:30]:30s} {item.total:>12,.2f} "
                    f"IVA {item.tax_amount:>10,.2f}  {item.rubrica or ''}"
                )


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
