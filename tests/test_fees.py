"""Tests for the default service fee tables."""

import pytest

from kasbook.domain.fees import (
    EDC_SERVICE_FEE,
    KJP_FEES,
    TOP_UP_FEES,
    TRANSFER_FEES,
    WITHDRAWAL_FEES,
    lookup_fee,
    mdr_fee,
    suggest_service_fee,
)
from kasbook.domain.kinds import TransactionKind


@pytest.mark.parametrize(
    "amount,expected",
    [
        (9_999, 0),
        (10_000, 3_000),
        (39_999, 3_000),
        (40_000, 5_000),
        (999_999, 5_000),
        (1_000_000, 7_000),
        (3_499_999, 10_000),
        (3_500_000, 15_000),
        (8_000_000, 25_000),
        (10_000_000, 25_000),
        (10_000_001, 0),
    ],
)
def test_transfer_fee_tiers(amount, expected):
    """Test transfer fee tier boundaries are inclusive."""
    assert suggest_service_fee(TransactionKind.CUSTOMER_TRANSFER, amount) == expected


def test_va_payment_uses_transfer_table():
    """Test VA payments share the transfer fee table."""
    assert suggest_service_fee(TransactionKind.CUSTOMER_VA_PAYMENT, 40_000) == 5_000


def test_withdrawal_fee_tiers():
    """Test withdrawal tiers start lower than transfers."""
    kind = TransactionKind.CUSTOMER_WITHDRAWAL
    assert suggest_service_fee(kind, 999) == 0
    assert suggest_service_fee(kind, 1_000) == 3_000
    assert suggest_service_fee(kind, 49_999) == 3_000
    assert suggest_service_fee(kind, 50_000) == 5_000
    assert suggest_service_fee(kind, 2_000_000) == 10_000


def test_top_up_fee_tiers():
    """Test top-up and e-money tiers."""
    assert suggest_service_fee(TransactionKind.CUSTOMER_TOP_UP, 299_999) == 3_000
    assert suggest_service_fee(TransactionKind.CUSTOMER_TOP_UP, 300_000) == 5_000
    assert suggest_service_fee(TransactionKind.CUSTOMER_EMONEY_TOP_UP, 300_000) == 5_000


@pytest.mark.parametrize(
    "amount,expected",
    [
        (10_000, 3_000),
        (105_999, 5_000),
        (106_000, 7_000),
        (208_000, 8_000),
        (410_999, 10_000),
        (512_000, 12_000),
        (512_001, 0),
    ],
)
def test_kjp_fee_tiers(amount, expected):
    """Test KJP tiers, which stop at the card limit."""
    assert suggest_service_fee(TransactionKind.CUSTOMER_KJP_WITHDRAWAL, amount) == expected


def test_edc_default_fee():
    """Test EDC rental has a flat default fee."""
    assert suggest_service_fee(TransactionKind.EDC_SERVICE, 0) == EDC_SERVICE_FEE


def test_ppob_kinds_have_no_fee_table():
    """Test PPOB kinds are priced by cost and selling price instead."""
    assert suggest_service_fee(TransactionKind.PPOB_PURCHASE, 50_000) is None
    assert suggest_service_fee(TransactionKind.PPOB_PLN_POSTPAID, 50_000) is None


def test_tables_are_contiguous():
    """Test every table covers its range without gaps or overlaps."""
    for table in (TRANSFER_FEES, WITHDRAWAL_FEES, TOP_UP_FEES, KJP_FEES):
        for (_, high, _), (next_low, _, _) in zip(table, table[1:]):
            assert next_low == high + 1


def test_lookup_fee_outside_every_tier():
    """Test amounts outside every tier get no fee."""
    assert lookup_fee(TRANSFER_FEES, 0) == 0


@pytest.mark.parametrize(
    "gross,expected",
    [
        (0, 0),
        (100_000, 150),
        (1_000, 2),  # 1.5 rounds half up
        (3_000, 5),  # 4.5 rounds half up
        (2_999, 4),  # 4.4985
        (1_234_567, 1_852),  # 1851.85
    ],
)
def test_mdr_fee_rounds_half_up(gross, expected):
    """Test MDR is 0.15 % rounded half up to whole Rupiah."""
    assert mdr_fee(gross) == expected
