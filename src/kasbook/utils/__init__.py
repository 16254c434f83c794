"""Utility functions for kasbook."""

from kasbook.utils.date_parser import parse_date
from kasbook.utils.amount_parser import format_rupiah, parse_amount

__all__ = ["parse_date", "parse_amount", "format_rupiah"]
