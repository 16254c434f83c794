"""Shift cash reconciliation service."""

import dataclasses
import logging
from datetime import date
from typing import Optional

from kasbook.database.base import Database
from kasbook.domain.account import AccountService
from kasbook.domain.entities import AccountRole, EntryType, OperatorContext, ShiftReconciliation
from kasbook.domain.errors import ValidationError
from kasbook.utils.date_parser import range_bounds

logger = logging.getLogger(__name__)


class ShiftService:
    """Compares the cash an operator counts with what the ledger expects."""

    def __init__(self, db: Database):
        self.db = db
        self.accounts = AccountService(db)

    def app_cash_in(self, day: date) -> int:
        """Sum of the cash drawer's credit entries on a day.

        Raises:
            RequiredAccountMissing: If no account is bound to the drawer role
        """
        drawer = self.accounts.resolve_role(AccountRole.CASH_DRAWER)
        start, end = range_bounds(day, day)
        entries = self.db.list_entries(
            account_id=drawer.id, start=start, end=end, entry_type=EntryType.CREDIT
        )
        return sum(entry.amount for entry in entries)

    def reconcile_shift(
        self,
        operator_name: str,
        voucher_cash_in: int,
        actual_physical_cash: int,
        context: OperatorContext,
        notes: str = "",
    ) -> ShiftReconciliation:
        """Record the end-of-shift cash count.

        The expected cash is today's drawer credits plus voucher sales; a
        positive difference means cash is missing from the drawer.

        Args:
            operator_name: Who closes the shift
            voucher_cash_in: Cash from voucher sales not recorded in the app
            actual_physical_cash: Counted cash
            context: Operator device and clock
            notes: Free-form remarks

        Returns:
            The saved reconciliation
        """
        operator_name = (operator_name or "").strip()
        if not operator_name:
            raise ValidationError("Operator name cannot be empty")
        if voucher_cash_in < 0 or actual_physical_cash < 0:
            raise ValidationError("Cash amounts cannot be negative")

        now = context.now()
        app_cash_in = self.app_cash_in(now.date())
        expected = app_cash_in + voucher_cash_in
        reconciliation = ShiftReconciliation(
            operator_name=operator_name,
            app_cash_in=app_cash_in,
            voucher_cash_in=voucher_cash_in,
            expected_total_cash=expected,
            actual_physical_cash=actual_physical_cash,
            difference=expected - actual_physical_cash,
            notes=notes,
            device_name=context.device_name,
            date=now,
        )
        reconciliation_id = self.db.save_shift_reconciliation(reconciliation)
        if reconciliation.difference:
            logger.warning(
                "Shift of %s closed with a cash difference of %d", operator_name, reconciliation.difference
            )
        return dataclasses.replace(reconciliation, id=reconciliation_id)

    def list_reconciliations(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[ShiftReconciliation]:
        """List saved shift reconciliations, newest first."""
        start, end = range_bounds(start_date, end_date)
        return self.db.list_shift_reconciliations(start=start, end=end)
