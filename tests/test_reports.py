"""Tests for profit summaries and daily reports."""

from datetime import date, datetime

import pytest

from kasbook.domain.engine import SHIFT_OPENING_CAPITAL, TransactionRequest
from kasbook.domain.entities import SpendingItem
from kasbook.domain.errors import ValidationError
from kasbook.domain.kinds import TransactionKind
from kasbook.domain.reports import REPORT_SETTINGS_KEY, DailyReportInputs

DAY = date(2024, 3, 15)


@pytest.fixture
def busy_day(engine, accounts, clock, context):
    """Record a typical day of kiosk business."""
    engine.execute(
        TransactionRequest(
            kind=TransactionKind.CUSTOMER_TRANSFER,
            source_account_id=accounts["BRI"],
            principal_amount=100_000,
            service_fee=5_000,
            counterparty_name="Budi",
        ),
        context,
    )
    clock.advance(minutes=1)
    engine.execute(
        TransactionRequest(
            kind=TransactionKind.PPOB_PURCHASE,
            source_account_id=accounts["Saldo PPOB"],
            principal_amount=49_500,
            service_fee=2_500,
            details={"product": "Pulsa 50rb"},
        ),
        context,
    )
    clock.advance(minutes=1)
    engine.add_capital(accounts["BRI"], 1_000_000, context)
    engine.add_capital(accounts["Laci"], 200_000, context, SHIFT_OPENING_CAPITAL)
    engine.record_operational_cost(accounts["Laci"], 25_000, "Kertas struk", context)
    engine.transfer_between_accounts(accounts["BRI"], accounts["BCA"], 500_000, context, admin_fee=2_500)
    engine.adjust_balance(accounts["QRIS"], 100_000, context, reason="Pembayaran QRIS")
    clock.advance(minutes=1)
    engine.settle_merchant(accounts["QRIS"], context)
    return accounts


def test_profit_summary_by_kind_and_group(report_service, busy_day):
    """Test profit is grouped by kind and report group with costs deducted."""
    summary = report_service.profit_summary(DAY, DAY)

    by_kind = {totals.kind: totals for totals in summary.by_kind}
    assert by_kind[TransactionKind.CUSTOMER_TRANSFER].count == 1
    assert by_kind[TransactionKind.CUSTOMER_TRANSFER].principal == 100_000
    assert by_kind[TransactionKind.CUSTOMER_TRANSFER].profit == 5_000
    assert by_kind[TransactionKind.PPOB_PURCHASE].profit == 2_500
    assert summary.brilink_profit == 5_000
    assert summary.ppob_profit == 2_500
    assert summary.total_gross_profit == 7_500

    costs = {item.description: item.amount for item in summary.cost_items}
    assert costs == {
        "Kertas struk": 25_000,
        "Biaya Admin Transfer ke: BCA": 2_500,
        "Biaya MDR Settlement dari QRIS": 150,
    }
    assert summary.operational_costs == 27_650
    assert summary.net_profit == 7_500 - 27_650


def test_profit_summary_respects_dates(report_service, engine, busy_day, clock, context):
    """Test transactions outside the range are left out."""
    clock.moment = datetime(2024, 3, 16, 9, 0)
    engine.record_edc_service("Toko Maju", context)

    assert report_service.profit_summary(DAY, DAY).brilink_profit == 5_000
    assert report_service.profit_summary(date(2024, 3, 16), date(2024, 3, 16)).brilink_profit == 5_000
    assert report_service.profit_summary(DAY, None).brilink_profit == 10_000
    assert report_service.profit_summary(date(2024, 3, 17), None).by_kind == ()


def test_profit_summary_rejects_reversed_range(report_service):
    """Test start after end is rejected."""
    with pytest.raises(ValidationError):
        report_service.profit_summary(date(2024, 3, 16), DAY)


def test_capital_added_skips_shift_opening(report_service, busy_day):
    """Test the drawer float for a new shift is not capital."""
    assert report_service.capital_added(DAY) == 1_000_000


def test_capital_additions_lists_every_account(report_service, busy_day):
    """Test the capital listing covers all accounts, shift floats included."""
    additions = report_service.capital_additions(DAY, DAY)

    assert [(entry.account_id, entry.amount) for entry in additions] == [
        (busy_day["BRI"], 1_000_000),
        (busy_day["Laci"], 200_000),
    ]
    assert additions[1].name == SHIFT_OPENING_CAPITAL
    assert report_service.capital_additions(date(2024, 3, 16), None) == []


def test_capital_additions_rejects_reversed_range(report_service):
    """Test start after end is rejected."""
    with pytest.raises(ValidationError):
        report_service.capital_additions(date(2024, 3, 16), DAY)


def test_daily_report_figures(report_service, busy_day):
    """Test every derived figure of the daily report."""
    inputs = DailyReportInputs(
        opening_balance=10_000_000,
        payment_to_party_b=2_000_000,
        spending_items=(SpendingItem("Makan siang", 25_000),),
        asset_accessories=100_000,
        asset_sim_cards=200_000,
        asset_vouchers=300_000,
        pos_gross_profit=50_000,
        operational_non_profit=10_000,
        cash_in_safe=500_000,
    )

    report = report_service.build_daily_report(DAY, inputs)

    assert report.total_account_balance == 5_497_350 + 2_500_000 + 450_500
    assert report.cash_in_drawer == 1_332_000
    assert report.capital_addition_today == 1_000_000
    assert report.liability_before_payment == 9_000_000
    assert report.liability_after_payment == 11_000_000
    assert report.manual_spending == 25_000
    assert report.final_liability_for_next_day == 10_975_000
    assert report.total_current_assets == 600_000
    assert report.gross_profit_brilink == 5_000
    assert report.gross_profit_ppob == 2_500
    assert report.total_gross_profit == 57_500
    assert report.operational_costs == 27_650
    assert report.net_profit == 29_850
    assert report.total_physical_cash == 1_832_000
    assert report.grand_total_balance == 21_187_350
    assert report.liquid_accumulation == 21_787_350
    assert report.id is None


def test_counted_drawer_cash_overrides_balance(report_service, busy_day):
    """Test the operator's cash count replaces the stored drawer balance."""
    report = report_service.build_daily_report(DAY, DailyReportInputs(cash_in_drawer=1_300_000))
    assert report.cash_in_drawer == 1_300_000
    assert report.total_physical_cash == 1_300_000


def test_extra_cost_items_are_added(report_service, busy_day):
    """Test manually entered costs join the recorded ones."""
    report = report_service.build_daily_report(
        DAY, DailyReportInputs(extra_cost_items=(SpendingItem("Listrik", 50_000),))
    )
    assert report.operational_costs == 77_650
    assert report.cost_items[-1] == SpendingItem("Listrik", 50_000)


def test_save_carries_final_liability_over(report_service, temp_db, busy_day, context):
    """Test saving stores the report and seeds the next day's opening balance."""
    assert report_service.last_final_liability() == 0

    report = report_service.build_daily_report(
        DAY,
        DailyReportInputs(
            opening_balance=10_000_000,
            payment_to_party_b=2_000_000,
            spending_items=(SpendingItem("Makan siang", 25_000),),
        ),
    )
    report_id = report_service.save_daily_report(report, context)

    assert temp_db.get_config(REPORT_SETTINGS_KEY) == {"lastFinalLiability": 10_975_000}
    next_day = report_service.build_daily_report(date(2024, 3, 16))
    assert next_day.opening_balance == 10_975_000
    assert next_day.capital_addition_today == 0

    saved = report_service.list_daily_reports()
    assert [r.id for r in saved] == [report_id]
    assert saved[0].report_date == DAY
    assert saved[0].final_liability_for_next_day == 10_975_000
    assert saved[0].spending_items == (SpendingItem("Makan siang", 25_000),)
    assert saved[0].cost_items == report.cost_items
    assert saved[0].created_at == datetime(2024, 3, 15, 10, 3)


def test_reports_are_append_only(report_service, context):
    """Test saving twice for one day keeps both snapshots, newest first."""
    first = report_service.save_daily_report(report_service.build_daily_report(DAY), context)
    second = report_service.save_daily_report(report_service.build_daily_report(DAY), context)
    assert [r.id for r in report_service.list_daily_reports(DAY, DAY)] == [second, first]
    assert report_service.list_daily_reports(date(2024, 3, 16), None) == []
