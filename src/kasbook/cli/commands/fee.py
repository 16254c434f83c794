"""Service fee lookup commands."""

import click
from kasbook.cli.params import AMOUNT
from kasbook.domain.fees import FEE_TABLES, suggest_service_fee
from kasbook.domain.kinds import TransactionKind, parse_kind
from kasbook.utils.amount_parser import format_rupiah

FEE_KINDS = sorted(kind.value for kind in list(FEE_TABLES) + [TransactionKind.EDC_SERVICE])


@click.group()
def fee_group():
    """Look up default service fees."""
    pass


@fee_group.command("suggest")
@click.argument("kind", type=click.Choice(FEE_KINDS))
@click.argument("amount", type=AMOUNT)
def suggest(kind: str, amount: int) -> None:
    """Suggest the service fee for KIND at AMOUNT.

    Examples:
        kasbook fee suggest customer_transfer 500rb
        kasbook fee suggest customer_kjp_withdrawal 300.000
    """
    fee = suggest_service_fee(parse_kind(kind), amount)
    if not fee:
        click.echo(f"No fee tier for {format_rupiah(amount)}; set the fee manually.")
        return
    click.echo(f"Suggested fee: {format_rupiah(fee)}")


def register_commands(cli):
    """Register fee commands with main CLI."""
    cli.add_command(fee_group, name="fee")
