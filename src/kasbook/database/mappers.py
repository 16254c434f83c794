"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the frozen domain entities never
leak session state to callers.
"""

from kasbook.domain import entities as domain
from kasbook.domain.kinds import TransactionKind
from kasbook.database.models import (
    KasAccount as ORMAccount,
    LedgerEntry as ORMLedgerEntry,
    AuditRecord as ORMAuditRecord,
    DailyReport as ORMDailyReport,
    ShiftReconciliation as ORMShiftReconciliation,
)

# DailyReport fields stored in the JSON ``figures`` column.
REPORT_FIGURES = (
    "total_account_balance",
    "opening_balance",
    "capital_addition_today",
    "liability_before_payment",
    "payment_to_party_b",
    "liability_after_payment",
    "manual_spending",
    "final_liability_for_next_day",
    "asset_accessories",
    "asset_sim_cards",
    "asset_vouchers",
    "total_current_assets",
    "gross_profit_brilink",
    "gross_profit_ppob",
    "pos_gross_profit",
    "total_gross_profit",
    "operational_costs",
    "operational_non_profit",
    "net_profit",
    "cash_in_drawer",
    "cash_in_safe",
    "total_physical_cash",
    "grand_total_balance",
    "liquid_accumulation",
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy KasAccount model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        label=orm_account.label,
        account_type=domain.AccountType(orm_account.account_type),
        balance=orm_account.balance,
        minimum_balance=orm_account.minimum_balance,
        created_at=orm_account.created_at,
        settlement_destination_id=orm_account.settlement_destination_id,
    )


def entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        entry_type=domain.EntryType(orm_entry.entry_type),
        name=orm_entry.name,
        counterparty_label=orm_entry.counterparty_label,
        date=orm_entry.date,
        amount=orm_entry.amount,
        balance_before=orm_entry.balance_before,
        balance_after=orm_entry.balance_after,
        category=orm_entry.category,
        device_name=orm_entry.device_name,
        audit_id=orm_entry.audit_id,
    )


def audit_record_to_domain(orm_record: ORMAuditRecord) -> domain.AuditRecord:
    """Convert SQLAlchemy AuditRecord model to domain AuditRecord entity."""
    payment_method = None
    if orm_record.payment_method is not None:
        payment_method = domain.PaymentMethod(orm_record.payment_method)
    return domain.AuditRecord(
        id=orm_record.id,
        kind=TransactionKind(orm_record.kind),
        date=orm_record.date,
        device_name=orm_record.device_name,
        source_account_id=orm_record.source_account_id,
        destination_account_id=orm_record.destination_account_id,
        counterparty_name=orm_record.counterparty_name,
        counterparty_detail=orm_record.counterparty_detail,
        principal_amount=orm_record.principal_amount,
        service_fee=orm_record.service_fee,
        admin_fee=orm_record.admin_fee,
        cashback=orm_record.cashback,
        profit=orm_record.profit,
        payment_method=payment_method,
        cash_amount=orm_record.cash_amount,
        transfer_account_id=orm_record.transfer_account_id,
        transfer_amount=orm_record.transfer_amount,
        details=dict(orm_record.details or {}),
    )


def daily_report_to_domain(orm_report: ORMDailyReport) -> domain.DailyReport:
    """Convert SQLAlchemy DailyReport model to domain DailyReport entity."""
    figures = {name: int(orm_report.figures.get(name, 0)) for name in REPORT_FIGURES}
    return domain.DailyReport(
        report_date=orm_report.report_date,
        spending_items=tuple(
            domain.SpendingItem(item["description"], int(item["amount"]))
            for item in orm_report.spending_items
        ),
        cost_items=tuple(
            domain.SpendingItem(item["description"], int(item["amount"]))
            for item in orm_report.cost_items
        ),
        id=orm_report.id,
        created_at=orm_report.created_at,
        **figures,
    )


def daily_report_figures(report: domain.DailyReport) -> dict[str, int]:
    """Extract the numeric figures of a report for JSON storage."""
    return {name: getattr(report, name) for name in REPORT_FIGURES}


def spending_items_to_json(items: tuple[domain.SpendingItem, ...]) -> list[dict]:
    """Serialize spending items for JSON storage."""
    return [{"description": item.description, "amount": item.amount} for item in items]


def shift_reconciliation_to_domain(orm_shift: ORMShiftReconciliation) -> domain.ShiftReconciliation:
    """Convert SQLAlchemy ShiftReconciliation model to domain entity."""
    return domain.ShiftReconciliation(
        id=orm_shift.id,
        date=orm_shift.date,
        operator_name=orm_shift.operator_name,
        app_cash_in=orm_shift.app_cash_in,
        voucher_cash_in=orm_shift.voucher_cash_in,
        expected_total_cash=orm_shift.expected_total_cash,
        actual_physical_cash=orm_shift.actual_physical_cash,
        difference=orm_shift.difference,
        notes=orm_shift.notes,
        device_name=orm_shift.device_name,
    )
