"""Reversal of recorded business transactions."""

import logging
from collections import defaultdict
from typing import Optional

from kasbook.database.base import DEFAULT_MAX_ATTEMPTS, Database, LedgerUnit
from kasbook.domain.entities import AuditRecord, LedgerEntry, OperatorContext, ReversalResult
from kasbook.domain.errors import (
    AccountNotFound,
    NonReversible,
    NotFoundError,
    ValidationError,
    entry_not_found,
)
from kasbook.domain.kinds import kind_for_category

logger = logging.getLogger(__name__)


def inverse_deltas(entries: list[LedgerEntry]) -> dict[int, int]:
    """Net balance change per account that undoes ``entries``.

    Credits are taken back and debits are returned; several entries on one
    account collapse into a single delta.
    """
    deltas: dict[int, int] = defaultdict(int)
    for entry in entries:
        deltas[entry.account_id] -= entry.signed_amount
    return dict(deltas)


class ReversalEngine:
    """Undoes a business transaction given any one of its ledger entries."""

    def __init__(self, db: Database, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.db = db
        self.max_attempts = max_attempts

    def siblings(self, entry_id: int) -> tuple[Optional[AuditRecord], list[LedgerEntry]]:
        """Preview what ``reverse`` would remove: the audit record and all its entries.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        if entry.audit_id is None:
            return None, [entry]
        return self.db.get_audit_record(entry.audit_id), self.db.list_entries(audit_id=entry.audit_id)

    def reverse(
        self,
        entry_id: int,
        context: OperatorContext,
        single_entry_fallback: bool = False,
    ) -> ReversalResult:
        """Reverse the transaction that produced a ledger entry.

        Inside one atomic unit every entry carrying the same audit id is
        deleted across all accounts, the net inverse delta is applied to each
        account balance read in the unit, and the audit record is deleted.

        Args:
            entry_id: Any ledger entry of the transaction
            context: Operator device and clock
            single_entry_fallback: For entries without an audit id, reverse
                just that entry instead of refusing

        Returns:
            ReversalResult listing deleted entries and applied balance changes

        Raises:
            NotFoundError: If the entry does not exist
            NonReversible: If the entry has no audit id and no fallback was requested
            AccountNotFound: If an affected account no longer exists
            TransactionAborted: If the store could not commit
        """
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        if entry.audit_id is None and not single_entry_fallback:
            raise NonReversible(entry_id)

        def work(unit: LedgerUnit) -> ReversalResult:
            current = unit.get_entry(entry_id)
            if current is None:
                raise NotFoundError(entry_not_found(entry_id))

            audit = None
            if current.audit_id is None:
                entries = [current]
                kind = kind_for_category(current.category)
            else:
                audit = unit.get_audit_record(current.audit_id)
                entries = unit.find_entries_by_audit(current.audit_id)
                if audit is not None:
                    kind = audit.kind
                else:
                    logger.warning(
                        "Audit record %d is missing; reversing its %d entries anyway",
                        current.audit_id,
                        len(entries),
                    )
                    kind = kind_for_category(current.category)

            deltas = inverse_deltas(entries)
            for sibling in entries:
                unit.delete_entry(sibling.id)
            for account_id, delta in deltas.items():
                account = unit.get_account(account_id)
                if account is None:
                    raise AccountNotFound(account_id)
                if delta:
                    unit.set_balance(account_id, account.balance + delta)
            if audit is not None:
                unit.delete_audit_record(audit.id)

            return ReversalResult(
                audit_id=current.audit_id,
                kind=kind,
                deleted_entry_ids=tuple(e.id for e in entries),
                balance_changes=deltas,
            )

        result = self.db.run_in_transaction(work, self.max_attempts)
        logger.info(
            "Reversed %s (audit %s, %d entries) from %s",
            result.kind.value if result.kind else "entry",
            result.audit_id,
            len(result.deleted_entry_ids),
            context.device_name,
        )
        return result

    def rename_entry(self, entry_id: int, name: str) -> None:
        """Change the memo of a ledger entry, the only edit an entry allows.

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the entry does not exist
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Entry name cannot be empty")
        self.db.rename_entry(entry_id, name)
