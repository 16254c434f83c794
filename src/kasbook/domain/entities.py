"""Domain model entities for kasbook.

These are pure data classes representing business concepts, independent of
database schema. Amounts are whole Rupiah held in ``int``; there are no
fractional currency units anywhere in the model.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Any, Callable, Optional

from kasbook.domain.kinds import TransactionKind


class AccountType(str, Enum):
    """Kind of balance bucket a kas account represents."""

    BANK = "Bank"
    EWALLET = "E-Wallet"
    MERCHANT = "Merchant"
    PPOB = "PPOB"
    TUNAI = "Tunai"
    OTHER = "Lainnya"


class EntryType(str, Enum):
    """Direction of a ledger movement."""

    DEBIT = "debit"
    CREDIT = "credit"


class PaymentMethod(str, Enum):
    """How the customer pays the kiosk."""

    TUNAI = "Tunai"
    TRANSFER = "Transfer"
    SPLIT = "Split"


class FeePaymentMethod(str, Enum):
    """How a withdrawal customer pays the service fee."""

    TUNAI = "Tunai"
    DIPOTONG = "Dipotong"


class AccountRole(str, Enum):
    """Business roles resolved to concrete accounts through configuration."""

    CASH_DRAWER = "cash-drawer"
    KJP_AGENT = "kjp-agent"


@dataclass(frozen=True)
class Account:
    """Kas account domain entity."""

    id: int
    label: str
    account_type: AccountType
    balance: int
    minimum_balance: int
    created_at: datetime
    settlement_destination_id: Optional[int] = None

    @property
    def below_minimum(self) -> bool:
        """True when the balance is under the advisory floor."""
        return self.balance < self.minimum_balance


@dataclass(frozen=True)
class LedgerEntry:
    """One signed balance movement on one account."""

    id: int
    account_id: int
    entry_type: EntryType
    name: str
    counterparty_label: Optional[str]
    date: datetime
    amount: int
    balance_before: int
    balance_after: int
    category: Optional[str]
    device_name: Optional[str]
    audit_id: Optional[int]

    @property
    def signed_amount(self) -> int:
        """Amount as a balance delta: credits positive, debits negative."""
        return self.amount if self.entry_type == EntryType.CREDIT else -self.amount


@dataclass(frozen=True)
class AuditRecord:
    """Canonical record of one business transaction."""

    id: int
    kind: TransactionKind
    date: datetime
    device_name: Optional[str]
    source_account_id: Optional[int] = None
    destination_account_id: Optional[int] = None
    counterparty_name: Optional[str] = None
    counterparty_detail: Optional[str] = None
    principal_amount: int = 0
    service_fee: int = 0
    admin_fee: int = 0
    cashback: int = 0
    profit: int = 0
    payment_method: Optional[PaymentMethod] = None
    cash_amount: int = 0
    transfer_account_id: Optional[int] = None
    transfer_amount: int = 0
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def collection(self) -> str:
        """Logical collection the record belongs to."""
        return self.kind.collection


@dataclass(frozen=True)
class OperatorContext:
    """Who is operating, and what time it is, for one engine call."""

    device_name: str = "Unknown Device"
    clock: Callable[[], datetime] = datetime.now

    def now(self) -> datetime:
        return self.clock()


@dataclass(frozen=True)
class Receipt:
    """Result of a committed engine operation."""

    audit: AuditRecord
    entries: tuple[LedgerEntry, ...]
    balances: dict[int, int]

    @property
    def audit_id(self) -> int:
        return self.audit.id

    def delta_for(self, account_id: int) -> int:
        """Net balance change the operation applied to an account."""
        return sum(e.signed_amount for e in self.entries if e.account_id == account_id)

    @property
    def net_delta(self) -> int:
        """Sum of all balance changes across touched accounts."""
        return sum(e.signed_amount for e in self.entries)


@dataclass(frozen=True)
class ReversalResult:
    """Outcome of undoing a business transaction."""

    audit_id: Optional[int]
    kind: Optional[TransactionKind]
    deleted_entry_ids: tuple[int, ...]
    balance_changes: dict[int, int]


@dataclass(frozen=True)
class SpendingItem:
    """Manually entered spending or cost line in a daily report."""

    description: str
    amount: int


@dataclass(frozen=True)
class DailyReport:
    """Point-in-time daily financial snapshot."""

    report_date: date
    total_account_balance: int
    opening_balance: int
    capital_addition_today: int
    liability_before_payment: int
    payment_to_party_b: int
    liability_after_payment: int
    manual_spending: int
    final_liability_for_next_day: int
    asset_accessories: int
    asset_sim_cards: int
    asset_vouchers: int
    total_current_assets: int
    gross_profit_brilink: int
    gross_profit_ppob: int
    pos_gross_profit: int
    total_gross_profit: int
    operational_costs: int
    operational_non_profit: int
    net_profit: int
    cash_in_drawer: int
    cash_in_safe: int
    total_physical_cash: int
    grand_total_balance: int
    liquid_accumulation: int
    spending_items: tuple[SpendingItem, ...] = ()
    cost_items: tuple[SpendingItem, ...] = ()
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ShiftReconciliation:
    """Cash count at the end of an operator's shift."""

    operator_name: str
    app_cash_in: int
    voucher_cash_in: int
    expected_total_cash: int
    actual_physical_cash: int
    difference: int
    notes: str
    device_name: Optional[str]
    date: datetime
    id: Optional[int] = None
