"""Ledger entry commands: inspect, rename and reverse."""

import click
from kasbook.cli.error_handling import handle_domain_error
from kasbook.cli.params import get_db, get_max_attempts, get_operator
from kasbook.domain.errors import DomainError, NonReversible
from kasbook.domain.reversal import ReversalEngine
from kasbook.utils.amount_parser import format_rupiah

CONFIRMATION_KEYWORD = "HAPUS"


@click.group()
def entry_group():
    """Inspect, rename and reverse ledger entries."""
    pass


def _echo_entries(db, entries) -> None:
    labels = {account.id: account.label for account in db.list_accounts()}
    for entry in entries:
        click.echo(
            f"  Entry {entry.id}: {entry.date:%Y-%m-%d %H:%M} "
            f"{labels.get(entry.account_id, entry.account_id)} "
            f"{format_rupiah(entry.signed_amount)} | {entry.name}"
        )


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int) -> None:
    """Show an entry together with the rest of its transaction."""
    db = get_db(ctx)
    engine = ReversalEngine(db)
    try:
        audit, entries = engine.siblings(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if audit is None:
        click.echo("Entry belongs to no recorded transaction.")
    else:
        click.echo(f"Transaction {audit.kind.value} (Audit ID: {audit.id}) from {audit.device_name}")
        if audit.counterparty_name:
            click.echo(f"  Customer: {audit.counterparty_name}")
        click.echo(f"  Principal: {format_rupiah(audit.principal_amount)}")
        if audit.profit:
            click.echo(f"  Profit: {format_rupiah(audit.profit)}")
    _echo_entries(db, entries)


@entry_group.command("rename")
@click.argument("entry_id", type=int)
@click.argument("name")
@click.pass_context
def rename_entry(ctx, entry_id: int, name: str) -> None:
    """Change the memo of an entry.

    Examples:
        kasbook entry rename 42 "Trf an. Budi Santoso"
    """
    engine = ReversalEngine(get_db(ctx))
    try:
        engine.rename_entry(entry_id, name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed entry {entry_id}")


@entry_group.command("delete")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_entry(ctx, entry_id: int) -> None:
    """Reverse the whole transaction an entry belongs to.

    Every entry of the transaction is deleted, on every account, and the
    balances are restored. Type HAPUS to confirm.

    Examples:
        kasbook entry delete 42
    """
    db = get_db(ctx)
    engine = ReversalEngine(db, max_attempts=get_max_attempts(ctx))
    try:
        audit, entries = engine.siblings(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if audit is not None:
        click.echo(f"This reverses {audit.kind.value} (Audit ID: {audit.id}) and deletes:")
    else:
        click.echo("This deletes:")
    _echo_entries(db, entries)

    typed = click.prompt(f"Type {CONFIRMATION_KEYWORD} to confirm", default="", show_default=False)
    if typed.strip() != CONFIRMATION_KEYWORD:
        click.echo("Cancelled.")
        return

    operator = get_operator(ctx)
    try:
        result = engine.reverse(entry_id, operator)
    except NonReversible as e:
        click.echo(f"Warning: {e}", err=True)
        if not click.confirm("Reverse only this entry?", default=False):
            click.echo("Cancelled.")
            return
        try:
            result = engine.reverse(entry_id, operator, single_entry_fallback=True)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted {len(result.deleted_entry_ids)} entries")
    labels = {account.id: account.label for account in db.list_accounts()}
    for account_id, delta in result.balance_changes.items():
        click.echo(f"  {labels.get(account_id, account_id)}: {format_rupiah(delta)}")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
