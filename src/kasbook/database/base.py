"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, TypeVar
from datetime import date, datetime

# Import entities directly to avoid circular import through domain/__init__.py
from kasbook.domain.entities import (
    Account,
    AccountType,
    AuditRecord,
    DailyReport,
    EntryType,
    LedgerEntry,
    ShiftReconciliation,
)
from kasbook.domain.kinds import TransactionKind

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5


class LedgerUnit(ABC):
    """Handle on one atomic unit of work.

    Everything read or written through a unit is committed together by
    ``Database.run_in_transaction`` or not at all. Balances read here are the
    authoritative ones; any pre-flight read outside the unit may be stale.
    """

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Read an account for update."""
        pass

    @abstractmethod
    def set_balance(self, account_id: int, balance: int) -> None:
        """Overwrite the stored balance of an account."""
        pass

    @abstractmethod
    def add_audit_record(
        self, kind: TransactionKind, date: datetime, device_name: Optional[str], **fields: Any
    ) -> AuditRecord:
        """Create an audit record. Returns the record with its new ID."""
        pass

    @abstractmethod
    def get_audit_record(self, audit_id: int) -> Optional[AuditRecord]:
        """Get audit record by ID."""
        pass

    @abstractmethod
    def delete_audit_record(self, audit_id: int) -> None:
        """Delete an audit record."""
        pass

    @abstractmethod
    def add_ledger_entry(
        self,
        account_id: int,
        entry_type: EntryType,
        name: str,
        amount: int,
        balance_before: int,
        balance_after: int,
        date: datetime,
        category: Optional[str] = None,
        device_name: Optional[str] = None,
        counterparty_label: Optional[str] = None,
        audit_id: Optional[int] = None,
    ) -> LedgerEntry:
        """Append a ledger entry. Returns the entry with its new ID."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def find_entries_by_audit(self, audit_id: int) -> list[LedgerEntry]:
        """Find every ledger entry, across all accounts, tied to an audit record."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> None:
        """Delete a ledger entry."""
        pass

    @abstractmethod
    def get_config(self, key: str) -> Optional[dict[str, Any]]:
        """Read a configuration document for update, or None when unset."""
        pass

    @abstractmethod
    def set_config(self, key: str, value: dict[str, Any]) -> None:
        """Create or replace a configuration document."""
        pass


class Database(ABC):
    """Abstract database interface for kasbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Atomic units
    @abstractmethod
    def run_in_transaction(
        self, work: Callable[[LedgerUnit], T], max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ) -> T:
        """Run ``work`` inside one atomic unit and commit it.

        The unit is retried from scratch when a concurrent writer invalidates
        the accounts it read, so ``work`` must be free of side effects outside
        the unit.

        Args:
            work: Callable receiving the unit; its return value is returned
            max_attempts: Attempts before giving up

        Returns:
            Whatever ``work`` returned on the committed attempt

        Raises:
            TransactionAborted: On exhausted retries or a storage failure
            DomainError: Re-raised unchanged from ``work`` after rollback
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        label: str,
        account_type: AccountType,
        minimum_balance: int = 0,
        opening_balance: int = 0,
        settlement_destination_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
        device_name: Optional[str] = None,
    ) -> int:
        """Create a new account with an optional opening-balance entry. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_label(self, label: str) -> Optional[Account]:
        """Get account by label."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        label: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        minimum_balance: Optional[int] = None,
        settlement_destination_id: Optional[int] = None,
    ) -> None:
        """Update account fields. Balance is never updated here."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account that has no ledger entries."""
        pass

    @abstractmethod
    def get_account_entry_count(self, account_id: int) -> int:
        """Get count of ledger entries recorded against an account."""
        pass

    # Ledger operations
    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def list_entries(
        self,
        account_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        audit_id: Optional[int] = None,
        entry_type: Optional[EntryType] = None,
    ) -> list[LedgerEntry]:
        """List ledger entries in (date, id) order with optional filters.

        Args:
            account_id: Optional account filter
            start: Optional inclusive lower bound on the entry date
            end: Optional exclusive upper bound on the entry date
            audit_id: Optional audit record filter
            entry_type: Optional debit/credit filter
        """
        pass

    @abstractmethod
    def rename_entry(self, entry_id: int, name: str) -> None:
        """Update the memo of a ledger entry."""
        pass

    # Audit operations
    @abstractmethod
    def get_audit_record(self, audit_id: int) -> Optional[AuditRecord]:
        """Get audit record by ID."""
        pass

    @abstractmethod
    def list_audit_records(
        self,
        kinds: Optional[list[TransactionKind]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[AuditRecord]:
        """List audit records in (date, id) order.

        Args:
            kinds: Optional kinds to include
            start: Optional inclusive lower bound on the record date
            end: Optional exclusive upper bound on the record date
        """
        pass

    # Configuration documents
    @abstractmethod
    def get_config(self, key: str) -> Optional[dict[str, Any]]:
        """Get a configuration document, or None when unset."""
        pass

    @abstractmethod
    def set_config(self, key: str, value: dict[str, Any]) -> None:
        """Create or replace a configuration document."""
        pass

    # Reports
    @abstractmethod
    def save_daily_report(self, report: DailyReport, created_at: Optional[datetime] = None) -> int:
        """Append a daily report snapshot. Returns report ID."""
        pass

    @abstractmethod
    def list_daily_reports(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DailyReport]:
        """List daily reports with inclusive date bounds, newest first."""
        pass

    @abstractmethod
    def save_shift_reconciliation(self, reconciliation: ShiftReconciliation) -> int:
        """Append a shift reconciliation. Returns its ID."""
        pass

    @abstractmethod
    def list_shift_reconciliations(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[ShiftReconciliation]:
        """List shift reconciliations in the half-open range, newest first."""
        pass
