"""Business transaction kinds and their ledger category tags.

Every audit record carries one ``TransactionKind``. The kind decides the
logical collection the record belongs to, the prefix used for the category
tags of the ledger entries it produces, and the report group it counts
towards.
"""

from enum import Enum
from typing import Optional


class KindGroup(str, Enum):
    """Report grouping of transaction kinds."""

    BRILINK = "brilink"
    PPOB = "ppob"
    INTERNAL = "internal"


class TransactionKind(str, Enum):
    """Kind of business transaction an audit record describes."""

    CUSTOMER_TRANSFER = "customer_transfer"
    CUSTOMER_WITHDRAWAL = "customer_withdrawal"
    CUSTOMER_TOP_UP = "customer_topup"
    CUSTOMER_EMONEY_TOP_UP = "customer_emoney_topup"
    CUSTOMER_VA_PAYMENT = "customer_va_payment"
    EDC_SERVICE = "edc_service"
    CUSTOMER_KJP_WITHDRAWAL = "customer_kjp_withdrawal"
    PPOB_PURCHASE = "ppob_purchase"
    PPOB_PLN_POSTPAID = "ppob_pln_postpaid"
    PPOB_PDAM = "ppob_pdam"
    PPOB_BPJS = "ppob_bpjs"
    PPOB_WIFI = "ppob_wifi"
    PPOB_PAKET_TELPON = "ppob_paket_telpon"
    SETTLEMENT = "settlement"
    INTERNAL_TRANSFER = "internal_transfer"
    CAPITAL_ADDITION = "capital_addition"
    CAPITAL_WITHDRAWAL = "capital_withdrawal"
    OPERATIONAL_COST = "operational_cost"
    BALANCE_ADJUSTMENT = "balance_adjustment"

    @property
    def collection(self) -> str:
        """Logical audit collection name for this kind."""
        return COLLECTIONS[self]

    @property
    def category_prefix(self) -> str:
        """Prefix shared by the category tags of this kind's ledger entries."""
        return self.value

    @property
    def group(self) -> KindGroup:
        """Report group this kind counts towards."""
        return GROUPS[self]

    def category(self, suffix: Optional[str] = None) -> str:
        """Build a ledger category tag, e.g. ``customer_transfer_fee``."""
        if suffix is None:
            return self.category_prefix
        return f"{self.category_prefix}_{suffix}"


COLLECTIONS: dict[TransactionKind, str] = {
    TransactionKind.CUSTOMER_TRANSFER: "customerTransfers",
    TransactionKind.CUSTOMER_WITHDRAWAL: "customerWithdrawals",
    TransactionKind.CUSTOMER_TOP_UP: "customerTopUps",
    TransactionKind.CUSTOMER_EMONEY_TOP_UP: "customerEmoneyTopUps",
    TransactionKind.CUSTOMER_VA_PAYMENT: "customerVAPayments",
    TransactionKind.EDC_SERVICE: "edcServices",
    TransactionKind.CUSTOMER_KJP_WITHDRAWAL: "customerKJPWithdrawals",
    TransactionKind.PPOB_PURCHASE: "ppobTransactions",
    TransactionKind.PPOB_PLN_POSTPAID: "ppobPlnPostpaid",
    TransactionKind.PPOB_PDAM: "ppobPdam",
    TransactionKind.PPOB_BPJS: "ppobBpjs",
    TransactionKind.PPOB_WIFI: "ppobWifi",
    TransactionKind.PPOB_PAKET_TELPON: "ppobPaketTelpon",
    TransactionKind.SETTLEMENT: "settlements",
    TransactionKind.INTERNAL_TRANSFER: "internalTransfers",
    TransactionKind.CAPITAL_ADDITION: "capitalAdditions",
    TransactionKind.CAPITAL_WITHDRAWAL: "capitalWithdrawals",
    TransactionKind.OPERATIONAL_COST: "operationalCosts",
    TransactionKind.BALANCE_ADJUSTMENT: "balanceAdjustments",
}

GROUPS: dict[TransactionKind, KindGroup] = {
    TransactionKind.CUSTOMER_TRANSFER: KindGroup.BRILINK,
    TransactionKind.CUSTOMER_WITHDRAWAL: KindGroup.BRILINK,
    TransactionKind.CUSTOMER_TOP_UP: KindGroup.BRILINK,
    TransactionKind.CUSTOMER_EMONEY_TOP_UP: KindGroup.BRILINK,
    TransactionKind.CUSTOMER_VA_PAYMENT: KindGroup.BRILINK,
    TransactionKind.EDC_SERVICE: KindGroup.BRILINK,
    TransactionKind.CUSTOMER_KJP_WITHDRAWAL: KindGroup.BRILINK,
    TransactionKind.PPOB_PURCHASE: KindGroup.PPOB,
    TransactionKind.PPOB_PLN_POSTPAID: KindGroup.PPOB,
    TransactionKind.PPOB_PDAM: KindGroup.PPOB,
    TransactionKind.PPOB_BPJS: KindGroup.PPOB,
    TransactionKind.PPOB_WIFI: KindGroup.PPOB,
    TransactionKind.PPOB_PAKET_TELPON: KindGroup.PPOB,
    TransactionKind.SETTLEMENT: KindGroup.INTERNAL,
    TransactionKind.INTERNAL_TRANSFER: KindGroup.INTERNAL,
    TransactionKind.CAPITAL_ADDITION: KindGroup.INTERNAL,
    TransactionKind.CAPITAL_WITHDRAWAL: KindGroup.INTERNAL,
    TransactionKind.OPERATIONAL_COST: KindGroup.INTERNAL,
    TransactionKind.BALANCE_ADJUSTMENT: KindGroup.INTERNAL,
}

# Kinds that follow the customer-payment shape: debit a source account,
# collect principal plus service fee from the customer.
PAYMENT_KINDS = frozenset(
    {
        TransactionKind.CUSTOMER_TRANSFER,
        TransactionKind.CUSTOMER_TOP_UP,
        TransactionKind.CUSTOMER_EMONEY_TOP_UP,
        TransactionKind.CUSTOMER_VA_PAYMENT,
        TransactionKind.PPOB_PURCHASE,
        TransactionKind.PPOB_PLN_POSTPAID,
        TransactionKind.PPOB_PDAM,
        TransactionKind.PPOB_BPJS,
        TransactionKind.PPOB_WIFI,
        TransactionKind.PPOB_PAKET_TELPON,
    }
)

WITHDRAWAL_KINDS = frozenset(
    {TransactionKind.CUSTOMER_WITHDRAWAL, TransactionKind.CUSTOMER_KJP_WITHDRAWAL}
)

# Opening-balance entries are written at account creation and belong to no
# business transaction.
OPENING_BALANCE_CATEGORY = "opening_balance"


def kind_for_category(category: Optional[str]) -> Optional[TransactionKind]:
    """Resolve a ledger category tag to the kind that produced it.

    A tag matches a kind when it equals the kind's prefix or starts with
    the prefix followed by ``_``. Prefixes never nest, so at most one kind
    matches.

    Args:
        category: Ledger entry category tag

    Returns:
        Matching kind, or None for unknown tags and opening balances
    """
    if not category:
        return None
    for kind in TransactionKind:
        prefix = kind.category_prefix
        if category == prefix or category.startswith(prefix + "_"):
            return kind
    return None


def parse_kind(value: str) -> TransactionKind:
    """Parse a kind from its value or its collection name.

    Raises:
        ValueError: If the value names no kind
    """
    for kind in TransactionKind:
        if value in (kind.value, kind.collection, kind.name.lower()):
            return kind
    raise ValueError(f"Unknown transaction kind '{value}'")
