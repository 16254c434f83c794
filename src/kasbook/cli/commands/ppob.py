"""PPOB sale and bill payment commands."""

import click
from kasbook.cli.error_handling import handle_domain_error
from kasbook.cli.params import AMOUNT
from kasbook.cli.payments import payment_options, record_payment
from kasbook.domain.errors import ValidationError
from kasbook.domain.kinds import TransactionKind


@click.group()
def ppob_group():
    """Record PPOB product sales and bill payments."""
    pass


def _record_sale(ctx, kind, product, cost, price, options, extra_details=None):
    """Record a product sold at ``price`` that costs ``cost`` from the source account."""
    if price < cost:
        handle_domain_error(
            ctx, ValidationError(f"Selling price {price} is below the cost price {cost}")
        )
        return
    details = {"product": product, "costPrice": cost, "sellingPrice": price}
    details.update(extra_details or {})
    record_payment(ctx, kind, cost, price - cost, details=details, **options)


@ppob_group.command("purchase")
@click.argument("product")
@click.option("--cost", type=AMOUNT, required=True, help="Price charged to the source account")
@click.option("--price", type=AMOUNT, required=True, help="Price charged to the customer")
@payment_options
@click.pass_context
def purchase(ctx, product: str, cost: int, price: int, **options):
    """Sell a PPOB product such as pulsa or a token.

    Examples:
        kasbook ppob purchase "Pulsa 50rb" --cost 49.500 --price 52.000 --from "Saldo PPOB"
    """
    _record_sale(ctx, TransactionKind.PPOB_PURCHASE, product, cost, price, options)


@ppob_group.command("paket-telpon")
@click.argument("package")
@click.option("--cost", type=AMOUNT, required=True, help="Price charged to the source account")
@click.option("--price", type=AMOUNT, required=True, help="Price charged to the customer")
@click.option("--phone", help="Customer phone number")
@payment_options
@click.pass_context
def paket_telpon(ctx, package: str, cost: int, price: int, phone: str | None, **options):
    """Sell a phone data or call package.

    Examples:
        kasbook ppob paket-telpon "Telkomsel 10GB" --cost 60rb --price 65rb --from "Saldo PPOB"
    """
    if phone and not options.get("counterparty_detail"):
        options["counterparty_detail"] = phone
    _record_sale(
        ctx,
        TransactionKind.PPOB_PAKET_TELPON,
        package,
        cost,
        price,
        options,
        {"phoneNumber": phone} if phone else None,
    )


def _bill_command(name: str, kind: TransactionKind, summary: str, example: str):
    @ppob_group.command(name, help=f"{summary}\n\nExamples:\n    {example}")
    @click.argument("bill", type=AMOUNT)
    @click.option("--admin", type=AMOUNT, default=0, help="Admin fee collected from the customer")
    @click.option("--cashback", type=AMOUNT, default=0, help="Biller cashback credited to the source")
    @click.option("--customer-id", help="Customer or meter number")
    @payment_options
    @click.pass_context
    def command(ctx, bill: int, admin: int, cashback: int, customer_id: str | None, **options):
        if customer_id and not options.get("counterparty_detail"):
            options["counterparty_detail"] = customer_id
        details = {"customerId": customer_id} if customer_id else {}
        record_payment(
            ctx, kind, bill, admin, cashback_amount=cashback, details=details, **options
        )

    return command


_bill_command(
    "pln",
    TransactionKind.PPOB_PLN_POSTPAID,
    "Pay a postpaid PLN electricity bill.",
    "kasbook ppob pln 245.000 --admin 3000 --customer-id 5123... --from BRI",
)
_bill_command(
    "pdam",
    TransactionKind.PPOB_PDAM,
    "Pay a PDAM water bill.",
    "kasbook ppob pdam 88rb --admin 2500 --from BRI",
)
_bill_command(
    "bpjs",
    TransactionKind.PPOB_BPJS,
    "Pay a BPJS health insurance contribution.",
    "kasbook ppob bpjs 150rb --admin 2500 --from BRI",
)
_bill_command(
    "wifi",
    TransactionKind.PPOB_WIFI,
    "Pay an internet subscription bill.",
    "kasbook ppob wifi 330rb --admin 2500 --cashback 500 --from BRI",
)


def register_commands(cli):
    """Register PPOB commands with main CLI."""
    cli.add_command(ppob_group, name="ppob")
