"""Tests for database mappers."""

from datetime import date, datetime

from kasbook.database.models import (
    AuditRecord as ORMAuditRecord,
    DailyReport as ORMDailyReport,
    KasAccount as ORMAccount,
    LedgerEntry as ORMLedgerEntry,
)
from kasbook.database.mappers import (
    REPORT_FIGURES,
    account_to_domain,
    audit_record_to_domain,
    daily_report_figures,
    daily_report_to_domain,
    entry_to_domain,
    spending_items_to_json,
)
from kasbook.domain.entities import (
    Account,
    AccountType,
    EntryType,
    PaymentMethod,
    SpendingItem,
)
from kasbook.domain.kinds import TransactionKind


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM KasAccount to domain Account."""
        orm_account = ORMAccount(
            id=1,
            label="QRIS",
            account_type="Merchant",
            balance=150_000,
            minimum_balance=0,
            settlement_destination_id=2,
            created_at=datetime(2024, 3, 15, 8, 0),
        )

        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.label == "QRIS"
        assert account.account_type == AccountType.MERCHANT
        assert account.balance == 150_000
        assert account.settlement_destination_id == 2


class TestEntryMapper:
    """Tests for LedgerEntry mapper."""

    def test_entry_to_domain(self):
        """Test converting ORM LedgerEntry to domain LedgerEntry."""
        orm_entry = ORMLedgerEntry(
            id=7,
            account_id=1,
            entry_type="debit",
            name="Transfer ke Budi",
            counterparty_label="Budi",
            date=datetime(2024, 3, 15, 10, 0),
            amount=-100_000,
            balance_before=500_000,
            balance_after=400_000,
            category="Transfer Nasabah",
            device_name="Kasir 1",
            audit_id=3,
        )

        entry = entry_to_domain(orm_entry)

        assert entry.entry_type == EntryType.DEBIT
        assert entry.amount == -100_000
        assert entry.balance_after == 400_000
        assert entry.audit_id == 3


class TestAuditRecordMapper:
    """Tests for AuditRecord mapper."""

    def test_audit_record_to_domain(self):
        """Test enums are restored and details are copied."""
        details = {"product": "Pulsa 50rb"}
        orm_record = ORMAuditRecord(
            id=3,
            kind=TransactionKind.PPOB_PURCHASE.value,
            date=datetime(2024, 3, 15, 10, 0),
            device_name="Kasir 1",
            principal_amount=49_500,
            service_fee=2_500,
            admin_fee=0,
            cashback=0,
            profit=2_500,
            payment_method="Tunai",
            cash_amount=52_000,
            transfer_amount=0,
            details=details,
        )

        record = audit_record_to_domain(orm_record)

        assert record.kind == TransactionKind.PPOB_PURCHASE
        assert record.payment_method == PaymentMethod.TUNAI
        assert record.details == details
        assert record.details is not details

    def test_missing_payment_method_and_details(self):
        """Test internal movements without a payment method map cleanly."""
        orm_record = ORMAuditRecord(
            id=4,
            kind=TransactionKind.INTERNAL_TRANSFER.value,
            date=datetime(2024, 3, 15, 10, 0),
            device_name=None,
            principal_amount=0,
            service_fee=0,
            admin_fee=0,
            cashback=0,
            profit=0,
            cash_amount=0,
            transfer_amount=0,
            payment_method=None,
            details=None,
        )

        record = audit_record_to_domain(orm_record)

        assert record.payment_method is None
        assert record.details == {}


class TestDailyReportMapper:
    """Tests for DailyReport JSON storage."""

    def test_figures_round_trip_through_json_columns(self):
        """Test stored figures and items rebuild the report."""
        figures = {name: index * 1_000 for index, name in enumerate(REPORT_FIGURES)}
        orm_report = ORMDailyReport(
            id=2,
            report_date=date(2024, 3, 15),
            created_at=datetime(2024, 3, 15, 21, 0),
            figures=figures,
            spending_items=spending_items_to_json((SpendingItem("Makan siang", 25_000),)),
            cost_items=[],
        )

        report = daily_report_to_domain(orm_report)

        assert daily_report_figures(report) == figures
        assert report.spending_items == (SpendingItem("Makan siang", 25_000),)
        assert report.cost_items == ()
        assert report.id == 2

    def test_missing_figures_default_to_zero(self):
        """Test reports saved before a figure existed still load."""
        orm_report = ORMDailyReport(
            id=1,
            report_date=date(2024, 3, 15),
            created_at=datetime(2024, 3, 15, 21, 0),
            figures={"net_profit": 5_000},
            spending_items=[],
            cost_items=[],
        )

        report = daily_report_to_domain(orm_report)

        assert report.net_profit == 5_000
        assert report.grand_total_balance == 0
