"""Domain layer for kasbook application."""

from kasbook.domain.account import AccountService
from kasbook.domain.engine import TransactionEngine
from kasbook.domain.reversal import ReversalEngine
from kasbook.domain.duplicates import DuplicateGuard
from kasbook.domain.reconciliation import Reconciler
from kasbook.domain.reports import ReportService
from kasbook.domain.shift import ShiftService

__all__ = [
    "AccountService",
    "TransactionEngine",
    "ReversalEngine",
    "DuplicateGuard",
    "Reconciler",
    "ReportService",
    "ShiftService",
]
