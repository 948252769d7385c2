"""Automatic classification commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.cli.parsing import parse_assignments
from kwanza.domain.classification import ClassificationService
from kwanza.domain.entities import AccountingEntry, ClassificationMode, EntryStatus

MODES = [m.value for m in ClassificationMode]


def _period_options(f):
    f = click.option("--end-month", type=click.IntRange(1, 12), default=12, show_default=True)(f)
    f = click.option("--start-month", type=click.IntRange(1, 12), default=1, show_default=True)(f)
    f = click.option("--year", type=int, required=True, help="Fiscal year")(f)
    return click.argument("mode", type=click.Choice(MODES, case_sensitive=False))(f)


def _echo_entries(entries: list[AccountingEntry] | tuple[AccountingEntry, ...]) -> None:
    for entry in entries:
        iva = f" IVA {entry.iva_account} {entry.iva_amount:,.2f}" if entry.iva_amount and entry.iva_account else ""
        click.echo(
            f"{entry.key:16s} | {entry.date.isoformat()} | {entry.doc_number[:14]:14s} | "
            f"D {entry.debit_account or '-':14s} {entry.debit_amount:>12,.2f} | "
            f"C {entry.credit_account or '-':14s} {entry.credit_amount:>12,.2f}{iva} | {entry.status.value}"
        )
        for line in entry.extra_lines:
            if line.debit:
                click.echo(f"{'':16s}   + D {line.account_code:14s} {line.debit:>12,.2f}")
            elif line.credit:
                click.echo(f"{'':16s}   + C {line.account_code:14s} {line.credit:>12,.2f}")


@click.group()
def classify_group():
    """Classify sales, purchases and payroll into journal postings."""
    pass


@classify_group.command("preview")
@_period_options
@click.pass_context
def preview(ctx, mode: str, year: int, start_month: int, end_month: int):
    """Show the automatic classification of unposted sources.

    MODE is SALES, PURCHASES, SALARY_PROC or SALARY_PAY.
    """
    service = ClassificationService(ctx.obj["db"])
    try:
        entries = service.load_entries(ClassificationMode(mode.upper()), year, start_month, end_month)
        outcome = service.auto_classify(entries)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not outcome.entries:
        click.echo("Nothing to classify.")
        return
    _echo_entries(outcome.entries)
    for unresolved in outcome.unresolved:
        click.echo(f"Unresolved {unresolved.entry.key}: {unresolved.reason}", err=True)


@classify_group.command("post")
@_period_options
@click.option("--only", "only_keys", multiple=True, help="Post only these entry keys (repeatable)")
@click.option("--debit", "debit_overrides", multiple=True, help="KEY=CODE debit account override")
@click.option("--credit", "credit_overrides", multiple=True, help="KEY=CODE credit account override")
@click.option("--iva", "iva_overrides", multiple=True, help="KEY=CODE IVA account override")
@click.pass_context
def post(
    ctx,
    mode: str,
    year: int,
    start_month: int,
    end_month: int,
    only_keys: tuple[str, ...],
    debit_overrides: tuple[str, ...],
    credit_overrides: tuple[str, ...],
    iva_overrides: tuple[str, ...],
):
    """Classify and post unposted sources to the journal.

    Example:
        kwanza classify post SALES --year 2024 --start-month 3 --end-month 3 \\
            --credit INV-4-7=62.1.1
    """
    classification_mode = ClassificationMode(mode.upper())
    service = ClassificationService(ctx.obj["db"])
    try:
        entries = service.load_entries(classification_mode, year, start_month, end_month)
        if only_keys:
            entries = [entry for entry in entries if entry.key in set(only_keys)]
        outcome = service.auto_classify(entries)
        entries = list(outcome.entries)
        for side, values in (("debit", debit_overrides), ("credit", credit_overrides), ("iva", iva_overrides)):
            for key, code in parse_assignments(values):
                entries = service.set_account(entries, key, side, code)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    ready = [entry for entry in entries if entry.status == EntryStatus.CLASSIFIED]
    skipped = len(entries) - len(ready)
    if not ready:
        click.echo("Nothing to post.")
        return

    try:
        count = service.post_entries(classification_mode, ready)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Posted {len(ready)} entr(ies) as {count} journal line(s) in diary {classification_mode.diary}")
    if skipped:
        click.echo(f"Skipped {skipped} unclassified entr(ies)", err=True)


def register_commands(cli):
    """Register classification commands with main CLI."""
    cli.add_command(classify_group, name="classify")
