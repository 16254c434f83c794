"""Tests for ledger replay and balance reconciliation."""

import pytest

from kasbook.database.models import KasAccount, LedgerEntry
from kasbook.domain.engine import TransactionRequest
from kasbook.domain.errors import AccountNotFound
from kasbook.domain.kinds import TransactionKind


def pay(engine, accounts, context, name):
    return engine.execute(
        TransactionRequest(
            kind=TransactionKind.CUSTOMER_TRANSFER,
            source_account_id=accounts["BRI"],
            principal_amount=100_000,
            service_fee=5_000,
            counterparty_name=name,
        ),
        context,
    )


def test_fresh_accounts_are_consistent(reconciler, accounts):
    """Test opening-balance entries explain every starting balance."""
    reports = reconciler.reconcile_all()
    assert len(reports) == len(accounts)
    assert all(report.is_consistent for report in reports)
    by_id = {report.account_id: report for report in reports}
    assert by_id[accounts["BRI"]].replayed_balance == 5_000_000
    assert by_id[accounts["BRI"]].entry_count == 1
    assert by_id[accounts["QRIS"]].entry_count == 0


def test_consistent_after_transactions(engine, reconciler, accounts, clock, context):
    """Test engine postings keep stored balances equal to the replay."""
    pay(engine, accounts, context, "Budi")
    clock.advance(minutes=5)
    engine.transfer_between_accounts(accounts["BRI"], accounts["Laci"], 300_000, context, admin_fee=2_500)

    report = reconciler.reconcile(accounts["BRI"])
    assert report.is_consistent
    assert report.stored_balance == 5_000_000 - 100_000 - 302_500
    assert report.chain_gaps == ()


def test_mid_history_reversal_leaves_chain_gaps(engine, reversal_engine, reconciler, accounts, clock, context):
    """Test reversing an older transaction keeps the balance right but breaks the snapshot chain."""
    first = pay(engine, accounts, context, "Budi")
    clock.advance(minutes=1)
    second = pay(engine, accounts, context, "Siti")

    reversal_engine.reverse(first.entries[0].id, context)

    report = reconciler.reconcile(accounts["BRI"])
    assert report.is_consistent
    assert report.replayed_balance == 4_900_000
    assert [gap.entry_id for gap in report.chain_gaps] == [second.entries[0].id]
    assert report.chain_gaps[0].expected == 5_000_000
    assert report.chain_gaps[0].recorded == 4_900_000


def test_tampered_balance_is_reported(temp_db, reconciler, accounts):
    """Test a stored balance that the ledger cannot explain is flagged."""
    session = temp_db.session_factory()
    account = session.get(KasAccount, accounts["BCA"])
    account.balance = 2_500_000
    session.commit()
    session.close()
    temp_db.disconnect()

    report = reconciler.reconcile(accounts["BCA"])
    assert not report.is_consistent
    assert report.difference == 500_000


def test_arithmetic_fault_is_reported(temp_db, reconciler, accounts):
    """Test an entry whose snapshot does not add up is flagged."""
    session = temp_db.session_factory()
    entry = session.query(LedgerEntry).filter(LedgerEntry.account_id == accounts["Laci"]).first()
    entry.balance_after = entry.balance_after + 1
    entry_id = entry.id
    session.commit()
    session.close()
    temp_db.disconnect()

    report = reconciler.reconcile(accounts["Laci"])
    assert not report.is_consistent
    assert [fault.entry_id for fault in report.arithmetic_faults] == [entry_id]


def test_reconcile_unknown_account(reconciler):
    """Test reconciling a missing account fails."""
    with pytest.raises(AccountNotFound):
        reconciler.reconcile(404)
