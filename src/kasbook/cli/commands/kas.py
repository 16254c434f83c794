"""Internal kas movement commands: transfers, capital, costs and settlements."""

import click
from kasbook.cli.account_resolution import resolve_account_or_exit
from kasbook.cli.error_handling import handle_domain_error
from kasbook.cli.params import AMOUNT, get_db, get_max_attempts, get_operator
from kasbook.cli.receipts import echo_receipt
from kasbook.domain.account import AccountService
from kasbook.domain.engine import SHIFT_OPENING_CAPITAL, TransactionEngine
from kasbook.domain.errors import DomainError


@click.group()
def kas_group():
    """Move money between kas accounts and record capital and costs."""
    pass


def _engine(ctx) -> TransactionEngine:
    return TransactionEngine(get_db(ctx), max_attempts=get_max_attempts(ctx))


def _run(ctx, action) -> None:
    try:
        receipt = action()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    echo_receipt(get_db(ctx), receipt)


@kas_group.command("transfer")
@click.argument("source", metavar="FROM")
@click.argument("destination", metavar="TO")
@click.argument("amount", type=AMOUNT)
@click.option("--admin-fee", type=AMOUNT, default=0, help="Bank fee paid by the source account")
@click.option("--description", help="Memo for both entries")
@click.pass_context
def transfer(ctx, source: str, destination: str, amount: int, admin_fee: int, description: str | None):
    """Transfer balance between two kas accounts.

    Examples:
        kasbook kas transfer BRI Laci 1jt
        kasbook kas transfer BRI BCA 2jt --admin-fee 2500
    """
    accounts = AccountService(get_db(ctx))
    source_id = resolve_account_or_exit(ctx, accounts, source)
    destination_id = resolve_account_or_exit(ctx, accounts, destination)
    engine = _engine(ctx)
    _run(
        ctx,
        lambda: engine.transfer_between_accounts(
            source_id,
            destination_id,
            amount,
            get_operator(ctx),
            admin_fee=admin_fee,
            description=description,
        ),
    )


@kas_group.command("capital-add")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", type=AMOUNT)
@click.option("--description", help="Memo for the capital entry")
@click.option(
    "--shift-opening",
    is_flag=True,
    help="Drawer float for a new shift; not counted as capital in daily reports",
)
@click.pass_context
def capital_add(ctx, account: str, amount: int, description: str | None, shift_opening: bool):
    """Add capital to an account.

    Examples:
        kasbook kas capital-add BRI 5jt
        kasbook kas capital-add Laci 500rb --shift-opening
    """
    if shift_opening:
        description = SHIFT_OPENING_CAPITAL
    account_id = resolve_account_or_exit(ctx, AccountService(get_db(ctx)), account)
    engine = _engine(ctx)
    _run(ctx, lambda: engine.add_capital(account_id, amount, get_operator(ctx), description))


@kas_group.command("capital-withdraw")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", type=AMOUNT)
@click.option("--description", help="Memo for the capital entry")
@click.pass_context
def capital_withdraw(ctx, account: str, amount: int, description: str | None):
    """Take capital out of an account.

    Examples:
        kasbook kas capital-withdraw Laci 1jt --description "Setor ke pemilik"
    """
    account_id = resolve_account_or_exit(ctx, AccountService(get_db(ctx)), account)
    engine = _engine(ctx)
    _run(ctx, lambda: engine.withdraw_capital(account_id, amount, get_operator(ctx), description))


@kas_group.command("cost")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", type=AMOUNT)
@click.argument("purpose")
@click.pass_context
def cost(ctx, account: str, amount: int, purpose: str):
    """Pay an operational cost out of an account.

    Examples:
        kasbook kas cost Laci 25rb "Beli kertas struk"
    """
    account_id = resolve_account_or_exit(ctx, AccountService(get_db(ctx)), account)
    engine = _engine(ctx)
    _run(ctx, lambda: engine.record_operational_cost(account_id, amount, purpose, get_operator(ctx)))


@kas_group.command("settle")
@click.argument("merchant", metavar="MERCHANT")
@click.option("--to", "destination", help="Override the merchant's settlement destination")
@click.pass_context
def settle(ctx, merchant: str, destination: str | None):
    """Settle a merchant account's balance, net of MDR.

    Examples:
        kasbook kas settle QRIS
        kasbook kas settle QRIS --to BCA
    """
    accounts = AccountService(get_db(ctx))
    merchant_id = resolve_account_or_exit(ctx, accounts, merchant)
    destination_id = None
    if destination is not None:
        destination_id = resolve_account_or_exit(ctx, accounts, destination)
    engine = _engine(ctx)
    _run(
        ctx,
        lambda: engine.settle_merchant(
            merchant_id, get_operator(ctx), destination_account_id=destination_id
        ),
    )


def register_commands(cli):
    """Register kas commands with main CLI."""
    cli.add_command(kas_group, name="kas")
