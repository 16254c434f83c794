"""Business role binding commands."""

import click
from kasbook.cli.account_resolution import resolve_account_or_exit
from kasbook.cli.error_handling import handle_domain_error
from kasbook.cli.params import get_db
from kasbook.domain.account import AccountService
from kasbook.domain.entities import AccountRole
from kasbook.domain.errors import DomainError

ROLE_NAMES = [role.value for role in AccountRole]


@click.group()
def role_group():
    """Bind business roles such as the cash drawer to accounts."""
    pass


@role_group.command("set")
@click.argument("role", type=click.Choice(ROLE_NAMES))
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def set_role(ctx, role: str, account: str) -> None:
    """Bind ROLE to ACCOUNT (label or ID).

    Examples:
        kasbook role set cash-drawer "Laci"
        kasbook role set kjp-agent "Agen KJP"
    """
    service = AccountService(get_db(ctx))
    account_id = resolve_account_or_exit(ctx, service, account)
    try:
        service.bind_role(AccountRole(role), account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Role '{role}' bound to account ID {account_id}")


@role_group.command("show")
@click.pass_context
def show_roles(ctx) -> None:
    """Show role bindings."""
    service = AccountService(get_db(ctx))
    bindings = service.role_bindings()
    for role in AccountRole:
        account_id = bindings.get(role)
        if account_id is None:
            click.echo(f"{role.value:12s} (unbound)")
            continue
        account = service.get_account(account_id)
        label = account.label if account is not None else "missing account"
        click.echo(f"{role.value:12s} {label} (ID: {account_id})")


@role_group.command("clear")
@click.argument("role", type=click.Choice(ROLE_NAMES))
@click.pass_context
def clear_role(ctx, role: str) -> None:
    """Remove the binding of ROLE."""
    service = AccountService(get_db(ctx))
    service.unbind_role(AccountRole(role))
    click.echo(f"Role '{role}' cleared")


def register_commands(cli):
    """Register role commands with main CLI."""
    cli.add_command(role_group, name="role")
