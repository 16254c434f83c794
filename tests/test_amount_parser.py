"""Tests for Rupiah amount parsing and formatting."""

import pytest

from kasbook.utils.amount_parser import format_rupiah, parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("150000", 150_000),
        ("Rp 150.000", 150_000),
        ("Rp150,000", 150_000),
        ("rp. 1.500.000", 1_500_000),
        ("1.500.000", 1_500_000),
        ("-25.000", -25_000),
        ("(25.000)", -25_000),
        ("50rb", 50_000),
        ("2jt", 2_000_000),
        ("1,5jt", 1_500_000),
        ("2.5 jt", 2_500_000),
        (" 7 500 ", 7_500),
    ],
)
def test_parse_amount(text, expected):
    """Test the formats operators type or paste."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "12.5", "Rp 1.50"])
def test_parse_amount_invalid(text):
    """Test unparseable and fractional amounts are rejected."""
    with pytest.raises(ValueError):
        parse_amount(text)


def test_format_rupiah():
    """Test receipt-style formatting with dot thousands separators."""
    assert format_rupiah(0) == "Rp 0"
    assert format_rupiah(1_500_000) == "Rp 1.500.000"
    assert format_rupiah(-25_000) == "-Rp 25.000"
