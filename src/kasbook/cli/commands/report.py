"""Profit, daily report and shift reconciliation commands."""

from datetime import date

import click
from kasbook.cli.date_filters import date_range_options, resolve_cli_date_range
from kasbook.cli.error_handling import handle_domain_error
from kasbook.cli.params import AMOUNT, SPENDING_ITEM, get_db, get_operator
from kasbook.domain.entities import DailyReport
from kasbook.domain.errors import DomainError
from kasbook.domain.reports import DailyReportInputs, ReportService
from kasbook.domain.shift import ShiftService
from kasbook.utils.amount_parser import format_rupiah
from kasbook.utils.date_parser import parse_date


@click.group()
def report_group():
    """Profit summaries, daily reports and shift closing."""
    pass


def _row(label: str, amount: int, indent: int = 0) -> None:
    click.echo(f"{' ' * indent}{label:<40s}{format_rupiah(amount):>18s}")


def _parse_day(ctx, value: str | None) -> date:
    if value is None:
        return get_operator(ctx).now().date()
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)


@report_group.command("profit")
@date_range_options
@click.pass_context
def profit(ctx, start_date: str | None, end_date: str | None, period: str | None) -> None:
    """Show profit per transaction kind.

    Defaults to today when no dates are given.

    Examples:
        kasbook report profit
        kasbook report profit --period this-month
        kasbook report profit --start-date 2024-01-01 --end-date 2024-01-31
    """
    today = get_operator(ctx).now().date()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period=period,
        default_range=(today, today),
    )
    service = ReportService(get_db(ctx))
    try:
        summary = service.profit_summary(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if start == end and start is not None:
        click.echo(f"\nProfit for {start.isoformat()}")
    else:
        click.echo(
            f"\nProfit from {start.isoformat() if start else 'the beginning'} "
            f"to {end.isoformat() if end else 'now'}"
        )
    click.echo("-" * 80)
    if not summary.by_kind:
        click.echo("No transactions found.")
    for totals in summary.by_kind:
        click.echo(
            f"{totals.kind.value:28s} {totals.count:5d}x  "
            f"{format_rupiah(totals.principal):>18s}  {format_rupiah(totals.profit):>14s}"
        )
    click.echo("-" * 80)
    _row("Gross profit BRILink", summary.brilink_profit)
    _row("Gross profit PPOB", summary.ppob_profit)
    _row("Total gross profit", summary.total_gross_profit)
    for item in summary.cost_items:
        _row(item.description, -item.amount, indent=2)
    _row("Operational costs", summary.operational_costs)
    _row("Net profit", summary.net_profit)


@report_group.command("capital")
@date_range_options
@click.pass_context
def capital(ctx, start_date: str | None, end_date: str | None, period: str | None) -> None:
    """List capital added to any account.

    Defaults to today when no dates are given.

    Examples:
        kasbook report capital
        kasbook report capital --period this-month
    """
    today = get_operator(ctx).now().date()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period=period,
        default_range=(today, today),
    )
    service = ReportService(get_db(ctx))
    try:
        additions = service.capital_additions(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not additions:
        click.echo("No capital additions found.")
        return

    labels = {account.id: account.label for account in service.accounts.list_accounts()}
    click.echo(f"{'Date':16}  {'Account':20}  {'Description':28}  {'Amount':>14}")
    click.echo("-" * 84)
    for entry in additions:
        click.echo(
            f"{entry.date:%Y-%m-%d %H:%M}  {labels.get(entry.account_id, '?')[:20]:20}  "
            f"{entry.name[:28]:28}  {format_rupiah(entry.amount):>14}"
        )
    click.echo("-" * 84)
    _row("Total capital added", sum(entry.amount for entry in additions))


def _echo_daily_report(report: DailyReport) -> None:
    heading = f"\nDaily report {report.report_date.isoformat()}"
    if report.id is not None:
        heading += f" (ID: {report.id})"
    click.echo(heading)
    click.echo("-" * 60)
    _row("Total account balance", report.total_account_balance)
    click.echo("Liability")
    _row("Opening balance", report.opening_balance, 2)
    _row("Capital added today", report.capital_addition_today, 2)
    _row("Before payment to party B", report.liability_before_payment, 2)
    _row("Payment to party B", report.payment_to_party_b, 2)
    _row("After payment", report.liability_after_payment, 2)
    for item in report.spending_items:
        _row(item.description, -item.amount, 4)
    _row("Manual spending", report.manual_spending, 2)
    _row("Final liability for next day", report.final_liability_for_next_day, 2)
    click.echo("Current assets")
    _row("Accessories", report.asset_accessories, 2)
    _row("SIM cards", report.asset_sim_cards, 2)
    _row("Vouchers", report.asset_vouchers, 2)
    _row("Total current assets", report.total_current_assets, 2)
    click.echo("Profit")
    _row("Gross profit BRILink", report.gross_profit_brilink, 2)
    _row("Gross profit PPOB", report.gross_profit_ppob, 2)
    _row("POS gross profit", report.pos_gross_profit, 2)
    _row("Total gross profit", report.total_gross_profit, 2)
    for item in report.cost_items:
        _row(item.description, -item.amount, 4)
    _row("Operational costs", report.operational_costs, 2)
    _row("Operational non-profit", report.operational_non_profit, 2)
    _row("Net profit", report.net_profit, 2)
    click.echo("Cash")
    _row("Cash in drawer", report.cash_in_drawer, 2)
    _row("Cash in safe", report.cash_in_safe, 2)
    _row("Total physical cash", report.total_physical_cash, 2)
    click.echo("-" * 60)
    _row("Grand total balance", report.grand_total_balance)
    _row("Liquid accumulation", report.liquid_accumulation)


@report_group.command("daily")
@click.option("--date", "day", help="Report day (defaults to today)")
@click.option("--opening-balance", type=AMOUNT, help="Defaults to the last saved final liability")
@click.option("--payment-to-b", type=AMOUNT, default=0, help="Payment to party B")
@click.option("--spend", multiple=True, type=SPENDING_ITEM, help="Manual spending item DESCRIPTION=AMOUNT")
@click.option("--cost", "extra_costs", multiple=True, type=SPENDING_ITEM, help="Extra operational cost DESCRIPTION=AMOUNT")
@click.option("--accessories", type=AMOUNT, default=0, help="Stock value of accessories")
@click.option("--sim-cards", type=AMOUNT, default=0, help="Stock value of SIM cards")
@click.option("--vouchers", type=AMOUNT, default=0, help="Stock value of vouchers")
@click.option("--pos-profit", type=AMOUNT, default=0, help="Gross profit from the POS")
@click.option("--non-profit", type=AMOUNT, default=0, help="Operational money that is not profit")
@click.option("--cash-in-drawer", type=AMOUNT, help="Counted drawer cash (defaults to the drawer balance)")
@click.option("--cash-in-safe", type=AMOUNT, default=0, help="Counted cash in the safe")
@click.option("--save", is_flag=True, help="Save the report and carry its final liability over")
@click.pass_context
def daily(
    ctx,
    day: str | None,
    opening_balance: int | None,
    payment_to_b: int,
    spend: tuple,
    extra_costs: tuple,
    accessories: int,
    sim_cards: int,
    vouchers: int,
    pos_profit: int,
    non_profit: int,
    cash_in_drawer: int | None,
    cash_in_safe: int,
    save: bool,
) -> None:
    """Compute the daily report, optionally saving it.

    Examples:
        kasbook report daily
        kasbook report daily --payment-to-b 2jt --spend "Makan siang=25rb" --save
    """
    report_day = _parse_day(ctx, day)
    service = ReportService(get_db(ctx))
    inputs = DailyReportInputs(
        opening_balance=opening_balance,
        payment_to_party_b=payment_to_b,
        spending_items=tuple(spend),
        asset_accessories=accessories,
        asset_sim_cards=sim_cards,
        asset_vouchers=vouchers,
        pos_gross_profit=pos_profit,
        operational_non_profit=non_profit,
        cash_in_drawer=cash_in_drawer,
        cash_in_safe=cash_in_safe,
        extra_cost_items=tuple(extra_costs),
    )
    report = service.build_daily_report(report_day, inputs)
    _echo_daily_report(report)

    if save:
        report_id = service.save_daily_report(report, get_operator(ctx))
        click.echo(f"\nSaved daily report (ID: {report_id})")


@report_group.command("daily-list")
@date_range_options
@click.option("--details", is_flag=True, help="Print every figure of each report")
@click.pass_context
def daily_list(ctx, start_date: str | None, end_date: str | None, period: str | None, details: bool) -> None:
    """List saved daily reports, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    reports = ReportService(get_db(ctx)).list_daily_reports(start, end)
    if not reports:
        click.echo("No daily reports found.")
        return

    for report in reports:
        if details:
            _echo_daily_report(report)
            continue
        click.echo(
            f"ID: {report.id:3d} | {report.report_date.isoformat()} | "
            f"net {format_rupiah(report.net_profit):>14s} | "
            f"final liability {format_rupiah(report.final_liability_for_next_day):>14s}"
        )


@report_group.command("shift")
@click.option("--operator", "operator_name", required=True, help="Operator closing the shift")
@click.option("--actual-cash", type=AMOUNT, required=True, help="Counted physical cash")
@click.option("--voucher-cash", type=AMOUNT, default=0, help="Cash from voucher sales")
@click.option("--notes", default="", help="Remarks")
@click.pass_context
def shift(ctx, operator_name: str, actual_cash: int, voucher_cash: int, notes: str) -> None:
    """Close a shift by comparing counted cash with the ledger.

    Examples:
        kasbook report shift --operator Rina --actual-cash 3.250.000 --voucher-cash 150rb
    """
    service = ShiftService(get_db(ctx))
    try:
        record = service.reconcile_shift(
            operator_name, voucher_cash, actual_cash, get_operator(ctx), notes=notes
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Shift closed by {record.operator_name} (ID: {record.id})")
    _row("App cash in", record.app_cash_in)
    _row("Voucher cash in", record.voucher_cash_in)
    _row("Expected total cash", record.expected_total_cash)
    _row("Actual physical cash", record.actual_physical_cash)
    _row("Difference", record.difference)
    if record.difference > 0:
        click.echo("Cash is short.")
    elif record.difference < 0:
        click.echo("Cash is over.")


@report_group.command("shift-list")
@date_range_options
@click.pass_context
def shift_list(ctx, start_date: str | None, end_date: str | None, period: str | None) -> None:
    """List shift reconciliations, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    records = ShiftService(get_db(ctx)).list_reconciliations(start, end)
    if not records:
        click.echo("No shift reconciliations found.")
        return
    for record in records:
        click.echo(
            f"ID: {record.id:3d} | {record.date:%Y-%m-%d %H:%M} | {record.operator_name:15s} | "
            f"expected {format_rupiah(record.expected_total_cash):>14s} | "
            f"difference {format_rupiah(record.difference):>12s}"
        )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
