"""Tests for transaction kinds and ledger category tags."""

import pytest

from kasbook.domain.kinds import (
    OPENING_BALANCE_CATEGORY,
    KindGroup,
    TransactionKind,
    kind_for_category,
    parse_kind,
)


def test_every_kind_has_collection_and_group():
    """Test the collection and group tables are exhaustive."""
    for kind in TransactionKind:
        assert kind.collection
        assert isinstance(kind.group, KindGroup)


def test_collections_are_unique():
    """Test no two kinds share a collection."""
    collections = [kind.collection for kind in TransactionKind]
    assert len(collections) == len(set(collections))


def test_no_prefix_nests_inside_another():
    """Test no category prefix is an underscore-delimited prefix of another."""
    prefixes = [kind.category_prefix for kind in TransactionKind]
    for prefix in prefixes:
        for other in prefixes:
            if prefix != other:
                assert not other.startswith(prefix + "_")


@pytest.mark.parametrize("kind", list(TransactionKind))
def test_category_resolves_back_to_kind(kind):
    """Test every generated category tag resolves to its own kind."""
    for suffix in (None, "debit", "credit", "fee", "cashback", "payment", "service_fee"):
        assert kind_for_category(kind.category(suffix)) == kind


def test_similar_prefixes_are_not_confused():
    """Test customer_topup and customer_emoney_topup stay distinct."""
    assert kind_for_category("customer_topup_debit") == TransactionKind.CUSTOMER_TOP_UP
    assert kind_for_category("customer_emoney_topup_debit") == TransactionKind.CUSTOMER_EMONEY_TOP_UP
    assert kind_for_category("customer_withdrawal_credit") == TransactionKind.CUSTOMER_WITHDRAWAL
    assert kind_for_category("customer_kjp_withdrawal_credit") == TransactionKind.CUSTOMER_KJP_WITHDRAWAL


def test_unknown_categories():
    """Test unknown tags and opening balances map to no kind."""
    assert kind_for_category(OPENING_BALANCE_CATEGORY) is None
    assert kind_for_category(None) is None
    assert kind_for_category("") is None
    assert kind_for_category("customer") is None
    assert kind_for_category("settlements_debit") is None


def test_report_groups():
    """Test kinds count towards the expected report group."""
    assert TransactionKind.EDC_SERVICE.group == KindGroup.BRILINK
    assert TransactionKind.PPOB_WIFI.group == KindGroup.PPOB
    assert TransactionKind.SETTLEMENT.group == KindGroup.INTERNAL


def test_parse_kind():
    """Test kinds parse from value, collection or enum name."""
    assert parse_kind("customer_transfer") == TransactionKind.CUSTOMER_TRANSFER
    assert parse_kind("customerKJPWithdrawals") == TransactionKind.CUSTOMER_KJP_WITHDRAWAL
    assert parse_kind("ppob_pln_postpaid") == TransactionKind.PPOB_PLN_POSTPAID
    with pytest.raises(ValueError, match="Unknown transaction kind"):
        parse_kind("lottery")
