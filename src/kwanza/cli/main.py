"""Main CLI entry point."""

import logging

import click
from kwanza.database.factories import create_sqlite_database

# Import and register all commands at module level
from kwanza.cli.commands import (
    pgc,
    mapping,
    invoice,
    purchase,
    employee,
    payroll,
    classify,
    ledger,
    vat,
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KWANZA_DB_PATH environment variable)",
    envvar="KWANZA_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="KWANZA_LOG_LEVEL",
    help="Logging level (overrides KWANZA_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Kwanza - Angolan accounting back office.

    Payroll with INSS/IRT withholding, the PGC chart of accounts, automatic
    classification of sales, purchases and salaries, opening balances,
    account extracts, the balancete and the monthly VAT settlement.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=getattr(logging, log_level.upper()), format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
pgc.register_commands(cli)
mapping.register_commands(cli)
invoice.register_commands(cli)
purchase.register_commands(cli)
employee.register_commands(cli)
payroll.register_commands(cli)
classify.register_commands(cli)
ledger.register_commands(cli)
vat.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
