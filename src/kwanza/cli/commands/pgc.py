"""PGC chart of accounts commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.domain.entities import AccountType, AccountNature, AccountTreeNode
from kwanza.domain.errors import DomainError
from kwanza.domain.pgc import PGCService, display_level

ACCOUNT_TYPES = [t.value for t in AccountType]
NATURES = [n.value for n in AccountNature]


@click.command("init-pgc")
@click.pass_context
def init_pgc(ctx):
    """Seed the database with the default PGC chart.

    Existing codes are left untouched, so the command can be re-run safely.
    """
    service = PGCService(ctx.obj["db"])
    created = service.seed_default_chart()
    click.echo(f"Created {created} PGC account(s)")


@click.group()
def pgc_group():
    """Manage the PGC chart of accounts."""
    pass


@pgc_group.command("list")
@click.option("--search", help="Filter by code or description")
@click.pass_context
def list_accounts(ctx, search: str | None):
    """List accounts in code order, indented by level."""
    service = PGCService(ctx.obj["db"])
    accounts = service.list_accounts(search=search)
    if not accounts:
        click.echo("No accounts found.")
        return

    for acc in accounts:
        indent = "  " * display_level(acc.code)
        code = f"{indent}{acc.code}"
        click.echo(f"{code:20s} | {acc.description:45s} | {acc.account_type.value:8s} | {acc.nature.value}")


@pgc_group.command("create")
@click.argument("code")
@click.argument("description")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="CONTA", show_default=True)
@click.option("--nature", type=click.Choice(NATURES), default="AMBOS", show_default=True)
@click.option("--parent", help="Parent code (derived from CODE when omitted)")
@click.pass_context
def create_account(ctx, code: str, description: str, account_type: str, nature: str, parent: str | None):
    """Create a PGC account.

    Examples:
        kwanza pgc create 31.1.2.1.5 "Cliente Exemplo"
        kwanza pgc create 75.2.1 "Água" --type SUBCONTA --nature DEBITO
    """
    service = PGCService(ctx.obj["db"])
    try:
        account_id = service.create_account(
            code=code,
            description=description,
            account_type=AccountType(account_type),
            nature=AccountNature(nature),
            parent_code=parent,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created account {code} (ID: {account_id})")


@pgc_group.command("update")
@click.argument("code")
@click.option("--code", "new_code", help="New code")
@click.option("--description", help="New description")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New type")
@click.option("--nature", type=click.Choice(NATURES), help="New nature")
@click.option("--parent", help="New parent code")
@click.pass_context
def update_account(
    ctx,
    code: str,
    new_code: str | None,
    description: str | None,
    account_type: str | None,
    nature: str | None,
    parent: str | None,
):
    """Edit a PGC account. Sub-accounts are not renamed."""
    service = PGCService(ctx.obj["db"])
    try:
        account = service.get_account_by_code(code)
        target_code = new_code or account.code
        service.update_account(
            account_id=account.id,
            code=target_code,
            description=description or account.description,
            account_type=AccountType(account_type) if account_type else account.account_type,
            nature=AccountNature(nature) if nature else account.nature,
            parent_code=parent if parent else (account.parent_code if target_code == account.code else None),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated account {target_code}")


def _echo_tree(nodes: tuple[AccountTreeNode, ...] | list[AccountTreeNode], depth: int = 0) -> None:
    for node in nodes:
        click.echo(f"{'  ' * depth}{node.account.code} {node.account.description}")
        _echo_tree(node.children, depth + 1)


@pgc_group.command("tree")
@click.pass_context
def show_tree(ctx):
    """Show the account hierarchy."""
    service = PGCService(ctx.obj["db"])
    tree = service.get_account_tree()
    if not tree:
        click.echo("No accounts found.")
        return
    _echo_tree(tree)


def register_commands(cli):
    """Register PGC commands with main CLI."""
    cli.add_command(init_pgc)
    cli.add_command(pgc_group, name="pgc")
