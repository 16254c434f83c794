"""Ledger replay for auditing stored account balances."""

from dataclasses import dataclass

from kasbook.database.base import Database
from kasbook.domain.entities import EntryType
from kasbook.domain.errors import AccountNotFound


@dataclass(frozen=True)
class EntryFault:
    """A ledger entry whose recorded figures disagree with the replay."""

    entry_id: int
    expected: int
    recorded: int


@dataclass(frozen=True)
class ReconciliationReport:
    """Result of replaying one account's ledger from zero.

    ``arithmetic_faults`` are entries whose ``balance_after`` does not follow
    from their own ``balance_before`` and amount. ``chain_gaps`` are entries
    whose ``balance_before`` differs from the running replay; they are
    expected after a transaction in the middle of the history was reversed.
    """

    account_id: int
    stored_balance: int
    replayed_balance: int
    entry_count: int
    arithmetic_faults: tuple[EntryFault, ...] = ()
    chain_gaps: tuple[EntryFault, ...] = ()

    @property
    def difference(self) -> int:
        return self.stored_balance - self.replayed_balance

    @property
    def is_consistent(self) -> bool:
        return not self.arithmetic_faults and self.replayed_balance == self.stored_balance


class Reconciler:
    """Replays ledger entries and compares them with stored balances."""

    def __init__(self, db: Database):
        self.db = db

    def reconcile(self, account_id: int) -> ReconciliationReport:
        """Replay the ledger of an account in (date, id) order.

        Raises:
            AccountNotFound: If account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFound(account_id)

        entries = self.db.list_entries(account_id=account_id)
        running = 0
        arithmetic_faults = []
        chain_gaps = []
        for entry in entries:
            if entry.balance_before != running:
                chain_gaps.append(EntryFault(entry.id, running, entry.balance_before))
            if entry.entry_type == EntryType.CREDIT:
                expected_after = entry.balance_before + entry.amount
            else:
                expected_after = entry.balance_before - entry.amount
            if entry.balance_after != expected_after:
                arithmetic_faults.append(EntryFault(entry.id, expected_after, entry.balance_after))
            running += entry.signed_amount

        return ReconciliationReport(
            account_id=account_id,
            stored_balance=account.balance,
            replayed_balance=running,
            entry_count=len(entries),
            arithmetic_faults=tuple(arithmetic_faults),
            chain_gaps=tuple(chain_gaps),
        )

    def reconcile_all(self) -> list[ReconciliationReport]:
        """Reconcile every account."""
        return [self.reconcile(account.id) for account in self.db.list_accounts()]
