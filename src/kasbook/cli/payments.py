"""Options and recording shared by customer and PPOB payment commands."""

from typing import Any, Optional

import click

from kasbook.cli.account_resolution import resolve_account_or_exit
from kasbook.cli.error_handling import run_with_duplicate_prompt
from kasbook.cli.params import AMOUNT, get_db, get_max_attempts, get_operator
from kasbook.cli.receipts import echo_receipt
from kasbook.domain.account import AccountService
from kasbook.domain.engine import TransactionEngine, TransactionRequest
from kasbook.domain.entities import PaymentMethod
from kasbook.domain.kinds import TransactionKind

PAYMENT_METHODS = [m.value for m in PaymentMethod]


def payment_options(func):
    """Add the source account, customer payment and duplicate options to a command."""
    options = [
        click.option(
            "--from",
            "source",
            required=True,
            help="Account the money leaves from (label or ID)",
        ),
        click.option(
            "--pay",
            type=click.Choice(PAYMENT_METHODS, case_sensitive=False),
            default=PaymentMethod.TUNAI.value,
            show_default=True,
            help="How the customer pays",
        ),
        click.option("--to-account", help="Account receiving the customer's transfer (Transfer/Split)"),
        click.option("--cash", type=AMOUNT, default=0, help="Cash portion of a Split payment"),
        click.option("--name", "counterparty_name", help="Customer or recipient name"),
        click.option("--detail", "counterparty_detail", help="Bank, phone number or customer ID"),
        click.option("--bank-fee", type=AMOUNT, default=0, help="Admin fee charged to the source account"),
        click.option("--force", is_flag=True, help="Record even if it looks like a duplicate"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _payment_method(value: str) -> PaymentMethod:
    return next(m for m in PaymentMethod if m.value.lower() == value.lower())


def record_payment(
    ctx: click.Context,
    kind: TransactionKind,
    principal_amount: int,
    service_fee: int,
    *,
    source: str,
    pay: str,
    to_account: Optional[str],
    cash: int,
    counterparty_name: Optional[str],
    counterparty_detail: Optional[str],
    bank_fee: int,
    force: bool,
    cashback_amount: int = 0,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """Build a payment request from CLI options, record it and print the receipt."""
    db = get_db(ctx)
    accounts = AccountService(db)
    source_id = resolve_account_or_exit(ctx, accounts, source)
    transfer_account_id = None
    if to_account is not None:
        transfer_account_id = resolve_account_or_exit(ctx, accounts, to_account)

    request = TransactionRequest(
        kind=kind,
        source_account_id=source_id,
        principal_amount=principal_amount,
        payment_method=_payment_method(pay),
        service_fee=service_fee,
        fee_amount=bank_fee,
        cashback_amount=cashback_amount,
        split_cash_amount=cash,
        transfer_account_id=transfer_account_id,
        counterparty_name=counterparty_name,
        counterparty_detail=counterparty_detail,
        details=details or {},
    )
    engine = TransactionEngine(db, max_attempts=get_max_attempts(ctx))
    operator = get_operator(ctx)

    receipt = run_with_duplicate_prompt(
        ctx, lambda forced: engine.execute(request, operator, force=forced), force=force
    )
    if receipt is not None:
        echo_receipt(db, receipt)
