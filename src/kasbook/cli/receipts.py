"""Receipt rendering shared by the transaction commands."""

import click

from kasbook.database.base import Database
from kasbook.domain.entities import Receipt
from kasbook.utils.amount_parser import format_rupiah


def echo_receipt(db: Database, receipt: Receipt) -> None:
    """Print the entries and resulting balances of a committed transaction."""
    labels = {account.id: account.label for account in db.list_accounts()}
    audit = receipt.audit
    click.echo(f"Recorded {audit.kind.value} (Audit ID: {audit.id})")
    for entry in receipt.entries:
        click.echo(
            f"  Entry {entry.id}: {labels.get(entry.account_id, entry.account_id)} "
            f"{format_rupiah(entry.signed_amount)} | {entry.name}"
        )
    for account_id, balance in receipt.balances.items():
        click.echo(f"  Balance {labels.get(account_id, account_id)}: {format_rupiah(balance)}")
    if audit.profit:
        click.echo(f"  Profit: {format_rupiah(audit.profit)}")
