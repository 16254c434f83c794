"""BRILink customer transaction commands."""

import click
from kasbook.cli.account_resolution import resolve_account_or_exit
from kasbook.cli.error_handling import run_with_duplicate_prompt
from kasbook.cli.params import AMOUNT, get_db, get_max_attempts, get_operator
from kasbook.cli.payments import payment_options, record_payment
from kasbook.cli.receipts import echo_receipt
from kasbook.domain.account import AccountService
from kasbook.domain.engine import TransactionEngine, WithdrawalRequest
from kasbook.domain.entities import FeePaymentMethod
from kasbook.domain.fees import EDC_SERVICE_FEE, suggest_service_fee
from kasbook.domain.kinds import TransactionKind
from kasbook.utils.amount_parser import format_rupiah

FEE_METHODS = [m.value for m in FeePaymentMethod]


@click.group()
def customer_group():
    """Record BRILink customer transactions."""
    pass


def _service_fee(kind: TransactionKind, amount: int, fee: int | None) -> int:
    """Use the operator's fee, or the suggested tier fee when none was given."""
    if fee is not None:
        return fee
    return suggest_service_fee(kind, amount) or 0


def _payment_command(name: str, kind: TransactionKind, summary: str, example: str):
    @customer_group.command(name, help=f"{summary}\n\nExamples:\n    {example}")
    @click.argument("amount", type=AMOUNT)
    @click.option("--fee", type=AMOUNT, help="Service fee (defaults to the fee table)")
    @payment_options
    @click.pass_context
    def command(ctx, amount: int, fee: int | None, **options):
        record_payment(ctx, kind, amount, _service_fee(kind, amount, fee), **options)

    return command


_payment_command(
    "transfer",
    TransactionKind.CUSTOMER_TRANSFER,
    "Send a customer's money to another bank account.",
    'kasbook customer transfer 500rb --from BRI --name "Budi" --detail "BCA 1234"',
)
_payment_command(
    "topup",
    TransactionKind.CUSTOMER_TOP_UP,
    "Top up a customer's wallet or bank account.",
    'kasbook customer topup 100.000 --from Dana --detail "0812..."',
)
_payment_command(
    "emoney",
    TransactionKind.CUSTOMER_EMONEY_TOP_UP,
    "Top up a customer's e-money card.",
    "kasbook customer emoney 50rb --from BRI --pay Transfer --to-account BCA",
)
_payment_command(
    "va",
    TransactionKind.CUSTOMER_VA_PAYMENT,
    "Pay a virtual account for a customer.",
    "kasbook customer va 1,5jt --from BRI --pay Split --cash 1jt --to-account BCA",
)


@customer_group.command("withdraw")
@click.argument("amount", type=AMOUNT)
@click.option("--to", "destination", required=True, help="Account receiving the customer's transfer")
@click.option("--fee", type=AMOUNT, help="Service fee (defaults to the fee table)")
@click.option(
    "--fee-method",
    type=click.Choice(FEE_METHODS, case_sensitive=False),
    default=FeePaymentMethod.TUNAI.value,
    show_default=True,
    help="Fee paid in cash on top, or deducted from the cash handed out",
)
@click.option("--name", "counterparty_name", help="Customer name")
@click.option("--detail", "counterparty_detail", help="Customer bank or card")
@click.option("--force", is_flag=True, help="Record even if it looks like a duplicate")
@click.pass_context
def withdraw(ctx, amount, destination, fee, fee_method, counterparty_name, counterparty_detail, force):
    """Hand out cash for a customer's transfer into one of our accounts.

    Examples:
        kasbook customer withdraw 200rb --to BRI --name "Siti"
        kasbook customer withdraw 1jt --to BRI --fee-method Dipotong
    """
    _withdraw(
        ctx,
        TransactionKind.CUSTOMER_WITHDRAWAL,
        amount,
        destination,
        fee,
        fee_method,
        counterparty_name,
        counterparty_detail,
        force,
    )


@customer_group.command("kjp")
@click.argument("amount", type=AMOUNT)
@click.option("--to", "destination", help="Account receiving the KJP transfer (defaults to the kjp-agent role)")
@click.option("--fee", type=AMOUNT, help="Service fee (defaults to the KJP fee table)")
@click.option(
    "--fee-method",
    type=click.Choice(FEE_METHODS, case_sensitive=False),
    default=FeePaymentMethod.TUNAI.value,
    show_default=True,
)
@click.option("--name", "counterparty_name", help="Student or parent name")
@click.option("--detail", "counterparty_detail", help="KJP card number")
@click.option("--force", is_flag=True, help="Record even if it looks like a duplicate")
@click.pass_context
def kjp(ctx, amount, destination, fee, fee_method, counterparty_name, counterparty_detail, force):
    """Hand out cash for a KJP card withdrawal.

    Examples:
        kasbook customer kjp 300rb --name "Andi"
    """
    _withdraw(
        ctx,
        TransactionKind.CUSTOMER_KJP_WITHDRAWAL,
        amount,
        destination,
        fee,
        fee_method,
        counterparty_name,
        counterparty_detail,
        force,
    )


def _withdraw(
    ctx, kind, amount, destination, fee, fee_method, counterparty_name, counterparty_detail, force
):
    db = get_db(ctx)
    destination_id = None
    if destination is not None:
        destination_id = resolve_account_or_exit(ctx, AccountService(db), destination)

    request = WithdrawalRequest(
        amount=amount,
        service_fee=_service_fee(kind, amount, fee),
        fee_payment_method=next(m for m in FeePaymentMethod if m.value.lower() == fee_method.lower()),
        destination_account_id=destination_id,
        kind=kind,
        counterparty_name=counterparty_name,
        counterparty_detail=counterparty_detail,
    )
    engine = TransactionEngine(db, max_attempts=get_max_attempts(ctx))
    operator = get_operator(ctx)
    receipt = run_with_duplicate_prompt(
        ctx, lambda forced: engine.withdraw_cash(request, operator, force=forced), force=force
    )
    if receipt is not None:
        echo_receipt(db, receipt)
        click.echo(f"  Cash to hand out: {format_rupiah(request.cash_handed_out)}")


@customer_group.command("edc")
@click.argument("customer_name")
@click.option("--fee", type=AMOUNT, default=EDC_SERVICE_FEE, show_default=True, help="Rental fee")
@click.option("--machine", help="EDC machine used")
@click.option("--force", is_flag=True, help="Record even if it looks like a duplicate")
@click.pass_context
def edc(ctx, customer_name: str, fee: int, machine: str | None, force: bool):
    """Record an EDC machine rental paid in cash.

    Examples:
        kasbook customer edc "Toko Maju" --machine "EDC BRI"
    """
    db = get_db(ctx)
    engine = TransactionEngine(db, max_attempts=get_max_attempts(ctx))
    operator = get_operator(ctx)
    receipt = run_with_duplicate_prompt(
        ctx,
        lambda forced: engine.record_edc_service(
            customer_name, operator, service_fee=fee, machine_used=machine, force=forced
        ),
        force=force,
    )
    if receipt is not None:
        echo_receipt(db, receipt)


def register_commands(cli):
    """Register customer commands with main CLI."""
    cli.add_command(customer_group, name="customer")
