"""Account domain service."""

import logging
from datetime import datetime
from typing import Optional

from kasbook.database.base import Database, LedgerUnit
from kasbook.domain.entities import (
    Account as AccountEntity,
    AccountRole,
    AccountType,
    LedgerEntry,
    OperatorContext,
)
from kasbook.domain.errors import (
    AccountNotFound,
    ConflictError,
    DependencyError,
    RequiredAccountMissing,
    ValidationError,
    account_delete_blocked,
    duplicate_account_label,
)

logger = logging.getLogger(__name__)

ROLES_CONFIG_KEY = "roles"


class AccountService:
    """Service for managing kas accounts and their business roles."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        label: str,
        account_type: AccountType = AccountType.BANK,
        opening_balance: int = 0,
        minimum_balance: int = 0,
        settlement_destination_id: Optional[int] = None,
        context: Optional[OperatorContext] = None,
    ) -> int:
        """Create a new account.

        A non-zero opening balance is written as an ``opening_balance`` credit
        entry, so the ledger of the account explains its balance from the
        start.

        Args:
            label: Display name, unique across accounts
            account_type: Kind of balance bucket
            opening_balance: Starting balance in Rupiah
            minimum_balance: Advisory floor shown in listings
            settlement_destination_id: Account receiving merchant settlements
            context: Operator context stamping the opening entry

        Returns:
            Account ID

        Raises:
            ValidationError: If the label is empty or an amount is negative
            ConflictError: If account label already exists
            AccountNotFound: If the settlement destination does not exist
        """
        label = (label or "").strip()
        if not label:
            raise ValidationError("Account label cannot be empty")
        if opening_balance < 0:
            raise ValidationError("Opening balance cannot be negative")
        if minimum_balance < 0:
            raise ValidationError("Minimum balance cannot be negative")
        if self.db.get_account_by_label(label) is not None:
            raise ConflictError(duplicate_account_label(label))
        if settlement_destination_id is not None:
            self.require_account(settlement_destination_id)

        context = context or OperatorContext()
        account_id = self.db.create_account(
            label=label,
            account_type=AccountType(account_type),
            minimum_balance=minimum_balance,
            opening_balance=opening_balance,
            settlement_destination_id=settlement_destination_id,
            created_at=context.now(),
            device_name=context.device_name,
        )
        logger.info("Created account %s (%s) with opening balance %d", account_id, label, opening_balance)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID, raising AccountNotFound when missing."""
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        return account

    def get_account_by_label(self, label: str) -> Optional[AccountEntity]:
        """Get account by its display label."""
        return self.db.get_account_by_label(label)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities ordered by label
        """
        return self.db.list_accounts()

    def rename_account(self, account_id: int, label: str) -> None:
        """Rename an account.

        Role bindings refer to the account ID, so renaming never detaches
        the cash drawer or any other role.

        Raises:
            AccountNotFound: If account doesn't exist
            ConflictError: If label is already used by another account
        """
        label = (label or "").strip()
        if not label:
            raise ValidationError("Account label cannot be empty")
        self.require_account(account_id)
        self.db.update_account(account_id, label=label)

    def update_account(
        self,
        account_id: int,
        account_type: Optional[AccountType] = None,
        minimum_balance: Optional[int] = None,
        settlement_destination_id: Optional[int] = None,
    ) -> None:
        """Update non-balance account settings."""
        self.require_account(account_id)
        if minimum_balance is not None and minimum_balance < 0:
            raise ValidationError("Minimum balance cannot be negative")
        if settlement_destination_id is not None:
            if settlement_destination_id == account_id:
                raise ValidationError("An account cannot settle into itself")
            self.require_account(settlement_destination_id)
        self.db.update_account(
            account_id,
            account_type=account_type,
            minimum_balance=minimum_balance,
            settlement_destination_id=settlement_destination_id,
        )

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Raises:
            AccountNotFound: If account doesn't exist
            DependencyError: If ledger entries or roles reference the account
        """
        self.require_account(account_id)
        entry_count = self.db.get_account_entry_count(account_id)
        role_names = [
            role.value for role, bound_id in self.role_bindings().items() if bound_id == account_id
        ]
        if entry_count > 0 or role_names:
            raise DependencyError(account_delete_blocked(account_id, entry_count, role_names))
        self.db.delete_account(account_id)

    def list_entries(
        self,
        account_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[LedgerEntry]:
        """List ledger entries, oldest first.

        Args:
            account_id: Account ID, or None for every account
            start: Optional inclusive lower date bound
            end: Optional exclusive upper date bound
        """
        if account_id is not None:
            self.require_account(account_id)
        return self.db.list_entries(account_id=account_id, start=start, end=end)

    # Role bindings
    def role_bindings(self) -> dict[AccountRole, int]:
        """Return the account ID bound to each configured role."""
        stored = self.db.get_config(ROLES_CONFIG_KEY) or {}
        bindings = {}
        for name, account_id in stored.items():
            try:
                bindings[AccountRole(name)] = int(account_id)
            except ValueError:
                logger.warning("Ignoring unknown role binding %r", name)
        return bindings

    def bind_role(self, role: AccountRole, account_id: int) -> None:
        """Bind a business role to an account, replacing any previous binding.

        The bindings are rewritten inside one atomic unit, so a role bound
        meanwhile by another device is kept rather than overwritten.
        """
        name = AccountRole(role).value

        def work(unit: LedgerUnit) -> None:
            if unit.get_account(account_id) is None:
                raise AccountNotFound(account_id)
            stored = unit.get_config(ROLES_CONFIG_KEY) or {}
            stored[name] = account_id
            unit.set_config(ROLES_CONFIG_KEY, stored)

        self.db.run_in_transaction(work)
        logger.info("Bound role %s to account %s", name, account_id)

    def unbind_role(self, role: AccountRole) -> None:
        """Remove a role binding. Unbound roles are left alone."""
        name = AccountRole(role).value

        def work(unit: LedgerUnit) -> None:
            stored = unit.get_config(ROLES_CONFIG_KEY) or {}
            if stored.pop(name, None) is not None:
                unit.set_config(ROLES_CONFIG_KEY, stored)

        self.db.run_in_transaction(work)

    def resolve_role(self, role: AccountRole) -> AccountEntity:
        """Resolve a role to its account.

        Raises:
            RequiredAccountMissing: If the role is unbound or its account is gone
        """
        account_id = self.role_bindings().get(AccountRole(role))
        if account_id is None:
            raise RequiredAccountMissing(role)
        account = self.db.get_account(account_id)
        if account is None:
            raise RequiredAccountMissing(role)
        return account

