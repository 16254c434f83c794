"""SQLAlchemy models for kasbook database."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class KasAccount(Base):
    """Kas account model.

    ``version`` is bumped on every flush that touches the row; a concurrent
    writer makes the stale flush fail with ``StaleDataError``.
    """

    __tablename__ = "kas_accounts"

    id = Column(Integer, primary_key=True)
    label = Column(String, unique=True, nullable=False)
    account_type = Column(String, nullable=False)
    balance = Column(BigInteger, default=0, nullable=False)
    minimum_balance = Column(BigInteger, default=0, nullable=False)
    settlement_destination_id = Column(Integer, ForeignKey("kas_accounts.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    entries = relationship("LedgerEntry", back_populates="account")


class LedgerEntry(Base):
    """Ledger entry model (one balance movement on one account)."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("kas_accounts.id"), nullable=False)
    entry_type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    counterparty_label = Column(String, nullable=True)
    date = Column(DateTime, nullable=False)
    amount = Column(BigInteger, nullable=False)
    balance_before = Column(BigInteger, nullable=False)
    balance_after = Column(BigInteger, nullable=False)
    category = Column(String, nullable=True)
    device_name = Column(String, nullable=True)
    audit_id = Column(Integer, nullable=True)

    __table_args__ = (
        Index("ix_ledger_entries_audit_id", "audit_id"),
        Index("ix_ledger_entries_account_date", "account_id", "date"),
    )

    # Relationships
    account = relationship("KasAccount", back_populates="entries")


class AuditRecord(Base):
    """Audit record model, one row per business transaction."""

    __tablename__ = "audit_records"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    device_name = Column(String, nullable=True)
    source_account_id = Column(Integer, nullable=True)
    destination_account_id = Column(Integer, nullable=True)
    counterparty_name = Column(String, nullable=True)
    counterparty_detail = Column(String, nullable=True)
    principal_amount = Column(BigInteger, default=0, nullable=False)
    service_fee = Column(BigInteger, default=0, nullable=False)
    admin_fee = Column(BigInteger, default=0, nullable=False)
    cashback = Column(BigInteger, default=0, nullable=False)
    profit = Column(BigInteger, default=0, nullable=False)
    payment_method = Column(String, nullable=True)
    cash_amount = Column(BigInteger, default=0, nullable=False)
    transfer_account_id = Column(Integer, nullable=True)
    transfer_amount = Column(BigInteger, default=0, nullable=False)
    details = Column(JSON, nullable=True)

    __table_args__ = (Index("ix_audit_records_kind_date", "kind", "date"),)


class DailyReport(Base):
    """Saved daily report snapshot."""

    __tablename__ = "daily_reports"

    id = Column(Integer, primary_key=True)
    report_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    figures = Column(JSON, nullable=False)
    spending_items = Column(JSON, nullable=False)
    cost_items = Column(JSON, nullable=False)


class ShiftReconciliation(Base):
    """Saved shift cash reconciliation."""

    __tablename__ = "shift_reconciliations"

    id = Column(Integer, primary_key=True)
    date = Column(DateTime, nullable=False)
    operator_name = Column(String, nullable=False)
    app_cash_in = Column(BigInteger, nullable=False)
    voucher_cash_in = Column(BigInteger, nullable=False)
    expected_total_cash = Column(BigInteger, nullable=False)
    actual_physical_cash = Column(BigInteger, nullable=False)
    difference = Column(BigInteger, nullable=False)
    notes = Column(String, nullable=False, default="")
    device_name = Column(String, nullable=True)


class AppConfig(Base):
    """Singleton configuration documents keyed by name, versioned like accounts."""

    __tablename__ = "app_config"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}


def create_session_factory(
    database_url: str, connect_args: Optional[dict[str, Any]] = None
) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False, connect_args=connect_args or {})
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
