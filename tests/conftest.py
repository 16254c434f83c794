"""Shared pytest fixtures for kasbook tests."""

import tempfile
import os
from datetime import datetime, timedelta
import pytest

from kasbook.database.factories import create_sqlite_database
from kasbook.domain.account import AccountService
from kasbook.domain.engine import TransactionEngine
from kasbook.domain.entities import AccountRole, AccountType, OperatorContext
from kasbook.domain.reconciliation import Reconciler
from kasbook.domain.reports import ReportService
from kasbook.domain.reversal import ReversalEngine
from kasbook.domain.shift import ShiftService


class FixedClock:
    """Clock that returns a settable moment."""

    def __init__(self, now: datetime):
        self.moment = now

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> None:
        self.moment += timedelta(**kwargs)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def reopen_db(temp_db):
    """Open a second handle on the test database, seeing what other handles committed."""
    handles = []

    def _reopen():
        db = create_sqlite_database(database_path=temp_db.database_path)
        db.connect()
        handles.append(db)
        return db

    yield _reopen

    for db in handles:
        db.disconnect()


@pytest.fixture
def clock():
    """A fixed clock at 10:00 on a Friday."""
    return FixedClock(datetime(2024, 3, 15, 10, 0))


@pytest.fixture
def context(clock):
    """Operator context stamping entries with the fixed clock."""
    return OperatorContext(device_name="Test Device", clock=clock)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def engine(temp_db):
    """Create a TransactionEngine with a temporary database."""
    return TransactionEngine(temp_db)


@pytest.fixture
def reversal_engine(temp_db):
    """Create a ReversalEngine with a temporary database."""
    return ReversalEngine(temp_db)


@pytest.fixture
def reconciler(temp_db):
    """Create a Reconciler with a temporary database."""
    return Reconciler(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def shift_service(temp_db):
    """Create a ShiftService with a temporary database."""
    return ShiftService(temp_db)


@pytest.fixture
def accounts(account_service, context):
    """Create the usual kiosk accounts and bind the cash drawer.

    Returns:
        Mapping of label to account ID
    """
    ids = {
        "Laci": account_service.create_account(
            "Laci", AccountType.TUNAI, opening_balance=1_000_000, context=context
        ),
        "BRI": account_service.create_account(
            "BRI", AccountType.BANK, opening_balance=5_000_000, context=context
        ),
        "BCA": account_service.create_account(
            "BCA", AccountType.BANK, opening_balance=2_000_000, context=context
        ),
        "Saldo PPOB": account_service.create_account(
            "Saldo PPOB", AccountType.PPOB, opening_balance=500_000, context=context
        ),
    }
    ids["QRIS"] = account_service.create_account(
        "QRIS", AccountType.MERCHANT, settlement_destination_id=ids["BRI"], context=context
    )
    account_service.bind_role(AccountRole.CASH_DRAWER, ids["Laci"])
    return ids


def balance(db, account_id: int) -> int:
    """Current stored balance of an account."""
    return db.get_account(account_id).balance


@pytest.fixture
def balances(temp_db, accounts):
    """Return a callable snapshotting every sample account balance."""

    def _snapshot():
        return {label: balance(temp_db, account_id) for label, account_id in accounts.items()}

    return _snapshot


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
