"""Account mapping commands."""

import click
from kwanza.cli.error_handling import handle_domain_error
from kwanza.domain.errors import DomainError
from kwanza.domain.mapping import AccountMapping, AccountMappingService


@click.group()
def mapping_group():
    """Show or override the accounts used by automatic classification."""
    pass


@mapping_group.command("list")
@click.pass_context
def list_mapping(ctx):
    """List mapping keys with their effective account codes."""
    service = AccountMappingService(ctx.obj["db"])
    mapping = service.get_mapping()
    overrides = service.list_overrides()
    for key in AccountMapping.keys():
        marker = " (custom)" if key in overrides else ""
        click.echo(f"{key:24s} {getattr(mapping, key)}{marker}")


@mapping_group.command("set")
@click.argument("key")
@click.argument("code")
@click.pass_context
def set_mapping(ctx, key: str, code: str):
    """Override the account code of KEY.

    Example:
        kwanza mapping set purchase_cost 75.2
    """
    service = AccountMappingService(ctx.obj["db"])
    try:
        service.set_code(key, code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"{key} -> {code}")


@mapping_group.command("reset")
@click.argument("key")
@click.pass_context
def reset_mapping(ctx, key: str):
    """Restore the default account code of KEY."""
    service = AccountMappingService(ctx.obj["db"])
    try:
        removed = service.reset(key)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if removed:
        click.echo(f"{key} reset to {getattr(AccountMapping(), key)}")
    else:
        click.echo(f"{key} already uses the default")


def register_commands(cli):
    """Register mapping commands with main CLI."""
    cli.add_command(mapping_group, name="mapping")
