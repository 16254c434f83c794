"""Tests for account management and role bindings."""

from datetime import datetime

import pytest

from kasbook.database.models import AppConfig
from kasbook.database.sqlalchemy_db import SQLAlchemyLedgerUnit
from kasbook.domain.account import ROLES_CONFIG_KEY
from kasbook.domain.entities import AccountRole, AccountType
from kasbook.domain.errors import (
    AccountNotFound,
    ConflictError,
    DependencyError,
    NotFoundError,
    RequiredAccountMissing,
    ValidationError,
)
from kasbook.domain.kinds import OPENING_BALANCE_CATEGORY
from kasbook.utils.account_resolver import resolve_account


def test_create_account_with_opening_balance(account_service, temp_db, context):
    """Test the opening balance is backed by a ledger entry."""
    account_id = account_service.create_account(
        "BRI", AccountType.BANK, opening_balance=750_000, minimum_balance=100_000, context=context
    )

    account = account_service.get_account(account_id)
    assert account.label == "BRI"
    assert account.account_type == AccountType.BANK
    assert account.balance == 750_000
    assert account.minimum_balance == 100_000
    assert account.created_at == datetime(2024, 3, 15, 10, 0)

    entries = account_service.list_entries(account_id)
    assert len(entries) == 1
    assert entries[0].category == OPENING_BALANCE_CATEGORY
    assert entries[0].balance_before == 0
    assert entries[0].balance_after == 750_000
    assert entries[0].audit_id is None
    assert entries[0].device_name == "Test Device"


def test_create_account_without_opening_balance_has_no_entries(account_service):
    """Test a zero opening balance writes nothing to the ledger."""
    account_id = account_service.create_account("Dana", AccountType.EWALLET)
    assert account_service.list_entries(account_id) == []
    assert account_service.get_account(account_id).balance == 0


def test_list_entries_of_every_account(account_service, accounts):
    """Test listing without an account returns the whole ledger in date order."""
    entries = account_service.list_entries()
    assert [entry.account_id for entry in entries] == [
        accounts["Laci"], accounts["BRI"], accounts["BCA"], accounts["Saldo PPOB"]
    ]


def test_list_entries_of_missing_account(account_service):
    """Test an unknown account is reported instead of listing nothing."""
    with pytest.raises(AccountNotFound):
        account_service.list_entries(42)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"label": "  "},
        {"label": "X", "opening_balance": -1},
        {"label": "X", "minimum_balance": -1},
    ],
)
def test_create_account_validation(account_service, kwargs):
    """Test invalid account input is rejected."""
    with pytest.raises(ValidationError):
        account_service.create_account(**kwargs)


def test_duplicate_label(account_service):
    """Test labels are unique."""
    account_service.create_account("BRI")
    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account(" BRI ")


def test_below_minimum(account_service):
    """Test the advisory minimum balance flag."""
    account_id = account_service.create_account("Dana", opening_balance=40_000, minimum_balance=50_000)
    assert account_service.get_account(account_id).below_minimum


def test_settlement_destination_must_exist(account_service):
    """Test merchant accounts can only settle into a known account."""
    with pytest.raises(AccountNotFound):
        account_service.create_account("QRIS", AccountType.MERCHANT, settlement_destination_id=99)


def test_rename_keeps_role_binding(account_service, accounts):
    """Test role bindings follow the account, not its label."""
    account_service.rename_account(accounts["Laci"], "Laci Depan")

    drawer = account_service.resolve_role(AccountRole.CASH_DRAWER)
    assert drawer.id == accounts["Laci"]
    assert drawer.label == "Laci Depan"


def test_rename_conflict(account_service, accounts):
    """Test renaming onto an existing label fails."""
    with pytest.raises(ConflictError):
        account_service.rename_account(accounts["BRI"], "BCA")


def test_update_account(account_service, accounts):
    """Test updating type, minimum balance and settlement destination."""
    account_service.update_account(
        accounts["BCA"],
        account_type=AccountType.MERCHANT,
        minimum_balance=10_000,
        settlement_destination_id=accounts["BRI"],
    )
    account = account_service.get_account(accounts["BCA"])
    assert account.account_type == AccountType.MERCHANT
    assert account.minimum_balance == 10_000
    assert account.settlement_destination_id == accounts["BRI"]

    with pytest.raises(ValidationError):
        account_service.update_account(accounts["BCA"], settlement_destination_id=accounts["BCA"])


def test_delete_account(account_service):
    """Test an unused account can be deleted."""
    account_id = account_service.create_account("Dana")
    account_service.delete_account(account_id)
    assert account_service.get_account(account_id) is None


def test_delete_blocked_by_entries(account_service, accounts):
    """Test accounts with ledger entries cannot be deleted."""
    with pytest.raises(DependencyError, match="ledger entr"):
        account_service.delete_account(accounts["BRI"])


def test_delete_blocked_by_role(account_service):
    """Test an account bound to a role cannot be deleted."""
    account_id = account_service.create_account("Laci Baru")
    account_service.bind_role(AccountRole.CASH_DRAWER, account_id)
    with pytest.raises(DependencyError, match="cash-drawer"):
        account_service.delete_account(account_id)


def test_role_bindings(account_service, accounts):
    """Test binding, resolving and clearing roles."""
    assert account_service.role_bindings() == {AccountRole.CASH_DRAWER: accounts["Laci"]}

    account_service.bind_role(AccountRole.KJP_AGENT, accounts["BCA"])
    assert account_service.resolve_role(AccountRole.KJP_AGENT).id == accounts["BCA"]

    account_service.unbind_role(AccountRole.KJP_AGENT)
    with pytest.raises(RequiredAccountMissing, match="kjp-agent"):
        account_service.resolve_role(AccountRole.KJP_AGENT)

    # Clearing an unbound role is harmless.
    account_service.unbind_role(AccountRole.KJP_AGENT)


def test_bind_role_to_missing_account(account_service):
    """Test roles only bind to existing accounts."""
    with pytest.raises(AccountNotFound):
        account_service.bind_role(AccountRole.CASH_DRAWER, 42)


def test_bind_role_keeps_concurrent_binding(account_service, accounts, temp_db, monkeypatch):
    """Test a role bound by another device mid-update survives the retry."""
    original = SQLAlchemyLedgerUnit.get_config
    calls = []

    def get_config_then_other_device_binds(self, key):
        value = original(self, key)
        calls.append(1)
        if len(calls) == 1:
            session = temp_db.session_factory()
            try:
                config = session.get(AppConfig, ROLES_CONFIG_KEY)
                config.value = {**config.value, AccountRole.KJP_AGENT.value: accounts["BRI"]}
                session.commit()
            finally:
                session.close()
        return value

    monkeypatch.setattr(SQLAlchemyLedgerUnit, "get_config", get_config_then_other_device_binds)

    account_service.bind_role(AccountRole.CASH_DRAWER, accounts["BCA"])

    assert len(calls) == 2
    assert account_service.role_bindings() == {
        AccountRole.CASH_DRAWER: accounts["BCA"],
        AccountRole.KJP_AGENT: accounts["BRI"],
    }


def test_list_accounts_ordered_by_label(account_service, accounts):
    """Test listing returns every account by label."""
    labels = [account.label for account in account_service.list_accounts()]
    assert labels == sorted(labels)
    assert set(labels) == set(accounts)


def test_resolve_account(account_service, accounts):
    """Test resolving accounts by label or ID."""
    assert resolve_account(account_service, "BRI") == accounts["BRI"]
    assert resolve_account(account_service, str(accounts["BCA"])) == accounts["BCA"]
    assert resolve_account(account_service, accounts["Laci"]) == accounts["Laci"]

    with pytest.raises(NotFoundError):
        resolve_account(account_service, "Mandiri")
    with pytest.raises(AccountNotFound):
        resolve_account(account_service, "999")


def test_label_wins_over_id(account_service, accounts):
    """Test an account labelled like a number is found by label first."""
    numeric = account_service.create_account(str(accounts["BRI"]))
    assert resolve_account(account_service, str(accounts["BRI"])) == numeric
