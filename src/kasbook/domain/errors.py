"""Shared domain error messages and error types."""

from typing import Any, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class AccountNotFound(NotFoundError):
    """A referenced kas account does not exist."""

    def __init__(self, account_id: int):
        super().__init__(account_not_found(account_id))
        self.account_id = account_id


class RequiredAccountMissing(NotFoundError):
    """A business role (e.g. the cash drawer) has no account bound to it."""

    def __init__(self, role: Any):
        super().__init__(role_not_bound(role))
        self.role = role


class InsufficientBalance(ValidationError):
    """An account cannot cover the amount the transaction debits from it."""

    def __init__(self, account_label: str, balance: int, required: int):
        super().__init__(insufficient_balance(account_label, balance, required))
        self.account_label = account_label
        self.balance = balance
        self.required = required


class InvalidSplit(ValidationError):
    """Split payment with a bad cash portion or no transfer target."""


class NonReversible(DomainError):
    """Ledger entry carries no audit id, so its siblings cannot be found."""

    def __init__(self, entry_id: int):
        super().__init__(
            f"Ledger entry {entry_id} has no audit id; only the entry itself can be reversed"
        )
        self.entry_id = entry_id


class TransactionAborted(DomainError):
    """The store could not commit the atomic unit (conflict or timeout)."""


class DuplicateDetected(DomainError):
    """A same-day audit record matches the candidate transaction.

    Advisory only: callers confirm with the operator and re-run with
    ``force=True``.
    """

    def __init__(self, match: Any):
        super().__init__(duplicate_transaction(match))
        self.match = match


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_label_not_found(label: str) -> str:
    """Return message for missing account by label."""
    return f"Account '{label}' not found"


def duplicate_account_label(label: str) -> str:
    """Return message for duplicate account label."""
    return f"Account with label '{label}' already exists"


def role_not_bound(role: Any) -> str:
    """Return message for a business role without an account."""
    name = getattr(role, "value", role)
    return f"No account is assigned to the '{name}' role"


def insufficient_balance(account_label: str, balance: int, required: int) -> str:
    """Return message for a balance that cannot cover a debit."""
    return (
        f"Balance of account '{account_label}' is insufficient: "
        f"has {balance}, needs {required}"
    )


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def audit_record_not_found(audit_id: int) -> str:
    """Return message for missing audit record."""
    return f"Audit record {audit_id} not found"


def duplicate_transaction(match: Any) -> str:
    """Return message describing a probable double submission."""
    audit_id = getattr(match, "id", None)
    counterparty = getattr(match, "counterparty_name", None) or "-"
    amount = getattr(match, "principal_amount", None)
    return (
        "A similar transaction was already recorded today "
        f"(audit {audit_id}: {counterparty}, amount {amount})"
    )


def account_delete_blocked(
    account_id: int, entry_count: int, role_names: Optional[list[str]] = None
) -> str:
    """Return message when account has ledger entries or role bindings."""
    parts = []
    if entry_count > 0:
        parts.append(f"{entry_count} ledger entr{'ies' if entry_count != 1 else 'y'}")
    if role_names:
        parts.append(f"role{'s' if len(role_names) != 1 else ''} {', '.join(role_names)}")
    return (
        f"Cannot delete account {account_id}: it has {' and '.join(parts)}. "
        "Reverse the entries or reassign the roles first."
    )
