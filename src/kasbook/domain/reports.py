"""Profit summaries and daily report snapshots."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from kasbook.database.base import Database
from kasbook.domain.account import AccountService
from kasbook.domain.engine import SHIFT_OPENING_CAPITAL
from kasbook.domain.entities import (
    AccountRole,
    DailyReport,
    EntryType,
    LedgerEntry,
    OperatorContext,
    SpendingItem,
)
from kasbook.domain.errors import ValidationError
from kasbook.domain.kinds import KindGroup, TransactionKind, kind_for_category
from kasbook.utils.date_parser import range_bounds

logger = logging.getLogger(__name__)

REPORT_SETTINGS_KEY = "dailyReportSettings"

OPERATIONAL_FEE_CATEGORIES = frozenset({TransactionKind.INTERNAL_TRANSFER.category("fee")})


@dataclass(frozen=True)
class KindTotals:
    """Count, principal and profit of one transaction kind."""

    kind: TransactionKind
    count: int
    principal: int
    profit: int


@dataclass(frozen=True)
class ProfitSummary:
    """Profit over a date range, by kind and by report group."""

    start_date: Optional[date]
    end_date: Optional[date]
    by_kind: tuple[KindTotals, ...]
    brilink_profit: int
    ppob_profit: int
    cost_items: tuple[SpendingItem, ...]

    @property
    def total_gross_profit(self) -> int:
        return self.brilink_profit + self.ppob_profit

    @property
    def operational_costs(self) -> int:
        return sum(item.amount for item in self.cost_items)

    @property
    def net_profit(self) -> int:
        return self.total_gross_profit - self.operational_costs


@dataclass(frozen=True)
class DailyReportInputs:
    """Figures the operator counts or types in for a daily report.

    ``opening_balance`` defaults to the final liability carried over from
    the last saved report, ``cash_in_drawer`` to the drawer's stored balance.
    """

    opening_balance: Optional[int] = None
    payment_to_party_b: int = 0
    spending_items: tuple[SpendingItem, ...] = ()
    asset_accessories: int = 0
    asset_sim_cards: int = 0
    asset_vouchers: int = 0
    pos_gross_profit: int = 0
    operational_non_profit: int = 0
    cash_in_drawer: Optional[int] = None
    cash_in_safe: int = 0
    extra_cost_items: tuple[SpendingItem, ...] = field(default_factory=tuple)


class ReportService:
    """Service for profit summaries and daily report snapshots."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db
        self.accounts = AccountService(db)

    def cost_items(self, start_date: Optional[date], end_date: Optional[date]) -> list[SpendingItem]:
        """Operational costs recorded in a date range.

        Covers operational-cost debits, internal transfer admin fees and the
        MDR withheld by settlements.
        """
        start, end = range_bounds(start_date, end_date)
        items = []
        for entry in self.db.list_entries(start=start, end=end, entry_type=EntryType.DEBIT):
            if (
                kind_for_category(entry.category) == TransactionKind.OPERATIONAL_COST
                or entry.category in OPERATIONAL_FEE_CATEGORIES
            ):
                items.append(SpendingItem(entry.name, entry.amount))

        labels = {account.id: account.label for account in self.accounts.list_accounts()}
        for record in self.db.list_audit_records(kinds=[TransactionKind.SETTLEMENT], start=start, end=end):
            mdr = int(record.details.get("mdrFee", record.admin_fee))
            if mdr > 0:
                source = labels.get(record.source_account_id, str(record.source_account_id))
                items.append(SpendingItem(f"Biaya MDR Settlement dari {source}", mdr))
        return items

    def profit_summary(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> ProfitSummary:
        """Summarize profit per transaction kind over an inclusive date range.

        Args:
            start_date: Optional first day
            end_date: Optional last day

        Returns:
            ProfitSummary with one row per kind that occurred
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")
        start, end = range_bounds(start_date, end_date)

        counts: dict[TransactionKind, int] = defaultdict(int)
        principals: dict[TransactionKind, int] = defaultdict(int)
        profits: dict[TransactionKind, int] = defaultdict(int)
        for record in self.db.list_audit_records(start=start, end=end):
            counts[record.kind] += 1
            principals[record.kind] += record.principal_amount
            profits[record.kind] += record.profit

        by_kind = tuple(
            KindTotals(kind, counts[kind], principals[kind], profits[kind])
            for kind in TransactionKind
            if counts[kind]
        )
        return ProfitSummary(
            start_date=start_date,
            end_date=end_date,
            by_kind=by_kind,
            brilink_profit=sum(t.profit for t in by_kind if t.kind.group == KindGroup.BRILINK),
            ppob_profit=sum(t.profit for t in by_kind if t.kind.group == KindGroup.PPOB),
            cost_items=tuple(self.cost_items(start_date, end_date)),
        )

    def capital_additions(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[LedgerEntry]:
        """List capital credited into any account over an inclusive date range.

        Shift-opening floats are included; they are capital entries too.

        Args:
            start_date: Optional first day
            end_date: Optional last day

        Returns:
            Capital-addition credit entries, oldest first
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")
        start, end = range_bounds(start_date, end_date)
        return [
            entry
            for entry in self.db.list_entries(start=start, end=end, entry_type=EntryType.CREDIT)
            if kind_for_category(entry.category) == TransactionKind.CAPITAL_ADDITION
        ]

    def capital_added(self, day: date) -> int:
        """Capital credited on a day, leaving out the drawer's shift-opening float."""
        return sum(
            entry.amount
            for entry in self.capital_additions(day, day)
            if entry.name != SHIFT_OPENING_CAPITAL
        )

    def last_final_liability(self) -> int:
        """Final liability carried over from the most recently saved report."""
        settings = self.db.get_config(REPORT_SETTINGS_KEY) or {}
        return int(settings.get("lastFinalLiability", 0))

    def build_daily_report(self, day: date, inputs: Optional[DailyReportInputs] = None) -> DailyReport:
        """Compute a daily report snapshot without saving it.

        Args:
            day: Report day
            inputs: Manually entered figures

        Returns:
            DailyReport with every derived figure filled in
        """
        inputs = inputs or DailyReportInputs()

        drawer_id = self.accounts.role_bindings().get(AccountRole.CASH_DRAWER)
        accounts = self.accounts.list_accounts()
        total_account_balance = sum(a.balance for a in accounts if a.id != drawer_id)
        cash_in_drawer = inputs.cash_in_drawer
        if cash_in_drawer is None:
            cash_in_drawer = next((a.balance for a in accounts if a.id == drawer_id), 0)

        opening_balance = inputs.opening_balance
        if opening_balance is None:
            opening_balance = self.last_final_liability()

        summary = self.profit_summary(day, day)
        cost_items = summary.cost_items + tuple(inputs.extra_cost_items)
        operational_costs = sum(item.amount for item in cost_items)

        capital_today = self.capital_added(day)
        liability_before = opening_balance - capital_today
        liability_after = liability_before + inputs.payment_to_party_b
        manual_spending = sum(item.amount for item in inputs.spending_items)
        final_liability = liability_after - manual_spending

        total_current_assets = inputs.asset_accessories + inputs.asset_sim_cards + inputs.asset_vouchers
        total_gross_profit = summary.brilink_profit + summary.ppob_profit + inputs.pos_gross_profit
        total_physical_cash = cash_in_drawer + inputs.cash_in_safe
        grand_total = (
            total_physical_cash
            + total_account_balance
            + final_liability
            - total_gross_profit
            - inputs.operational_non_profit
        )

        return DailyReport(
            report_date=day,
            total_account_balance=total_account_balance,
            opening_balance=opening_balance,
            capital_addition_today=capital_today,
            liability_before_payment=liability_before,
            payment_to_party_b=inputs.payment_to_party_b,
            liability_after_payment=liability_after,
            manual_spending=manual_spending,
            final_liability_for_next_day=final_liability,
            asset_accessories=inputs.asset_accessories,
            asset_sim_cards=inputs.asset_sim_cards,
            asset_vouchers=inputs.asset_vouchers,
            total_current_assets=total_current_assets,
            gross_profit_brilink=summary.brilink_profit,
            gross_profit_ppob=summary.ppob_profit,
            pos_gross_profit=inputs.pos_gross_profit,
            total_gross_profit=total_gross_profit,
            operational_costs=operational_costs,
            operational_non_profit=inputs.operational_non_profit,
            net_profit=total_gross_profit - operational_costs,
            cash_in_drawer=cash_in_drawer,
            cash_in_safe=inputs.cash_in_safe,
            total_physical_cash=total_physical_cash,
            grand_total_balance=grand_total,
            liquid_accumulation=grand_total + total_current_assets,
            spending_items=tuple(inputs.spending_items),
            cost_items=cost_items,
        )

    def save_daily_report(self, report: DailyReport, context: Optional[OperatorContext] = None) -> int:
        """Append a report and carry its final liability over to the next day.

        Returns:
            Report ID
        """
        context = context or OperatorContext()
        report_id = self.db.save_daily_report(report, created_at=context.now())
        settings = self.db.get_config(REPORT_SETTINGS_KEY) or {}
        settings["lastFinalLiability"] = report.final_liability_for_next_day
        self.db.set_config(REPORT_SETTINGS_KEY, settings)
        logger.info("Saved daily report %d for %s", report_id, report.report_date.isoformat())
        return report_id

    def list_daily_reports(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DailyReport]:
        """List saved daily reports, newest first."""
        return self.db.list_daily_reports(start_date=start_date, end_date=end_date)
