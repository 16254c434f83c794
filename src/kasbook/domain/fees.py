"""Default service-fee tables.

Each table is an ordered list of inclusive ``(low, high, fee)`` tiers.
Amounts outside every tier get no suggested fee. The suggestion only
pre-fills the service fee; the operator may override it.
"""

from typing import Optional

from kasbook.domain.kinds import TransactionKind

FeeTable = tuple[tuple[int, int, int], ...]

_UPPER_TIERS: FeeTable = (
    (1_000_000, 1_999_999, 7_000),
    (2_000_000, 3_499_999, 10_000),
    (3_500_000, 5_999_999, 15_000),
    (6_000_000, 7_999_999, 20_000),
    (8_000_000, 10_000_000, 25_000),
)

TRANSFER_FEES: FeeTable = (
    (10_000, 39_999, 3_000),
    (40_000, 999_999, 5_000),
) + _UPPER_TIERS

WITHDRAWAL_FEES: FeeTable = (
    (1_000, 49_999, 3_000),
    (50_000, 999_999, 5_000),
) + _UPPER_TIERS

TOP_UP_FEES: FeeTable = (
    (10_000, 299_999, 3_000),
    (300_000, 999_999, 5_000),
) + _UPPER_TIERS

KJP_FEES: FeeTable = (
    (10_000, 49_999, 3_000),
    (50_000, 105_999, 5_000),
    (106_000, 207_999, 7_000),
    (208_000, 308_999, 8_000),
    (309_000, 410_999, 10_000),
    (411_000, 512_000, 12_000),
)

EDC_SERVICE_FEE = 5_000

# Merchant discount rate charged on settlement, in basis points (0.15 %).
MDR_BASIS_POINTS = 15

FEE_TABLES: dict[TransactionKind, FeeTable] = {
    TransactionKind.CUSTOMER_TRANSFER: TRANSFER_FEES,
    TransactionKind.CUSTOMER_VA_PAYMENT: TRANSFER_FEES,
    TransactionKind.CUSTOMER_WITHDRAWAL: WITHDRAWAL_FEES,
    TransactionKind.CUSTOMER_TOP_UP: TOP_UP_FEES,
    TransactionKind.CUSTOMER_EMONEY_TOP_UP: TOP_UP_FEES,
    TransactionKind.CUSTOMER_KJP_WITHDRAWAL: KJP_FEES,
}


def lookup_fee(table: FeeTable, amount: int) -> int:
    """Return the fee of the tier containing ``amount``, or 0."""
    for low, high, fee in table:
        if low <= amount <= high:
            return fee
    return 0


def suggest_service_fee(kind: TransactionKind, amount: int) -> Optional[int]:
    """Suggest the default service fee for a transaction.

    Args:
        kind: Transaction kind
        amount: Principal amount in Rupiah

    Returns:
        Suggested fee, or None when the kind has no fee table (PPOB kinds
        are priced by cost and selling price instead)
    """
    if kind == TransactionKind.EDC_SERVICE:
        return EDC_SERVICE_FEE
    table = FEE_TABLES.get(kind)
    if table is None:
        return None
    return lookup_fee(table, amount)


def mdr_fee(gross_amount: int) -> int:
    """MDR fee on a settlement, rounded half-up to whole Rupiah."""
    if gross_amount <= 0:
        return 0
    return (gross_amount * MDR_BASIS_POINTS + 5_000) // 10_000
