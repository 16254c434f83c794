"""Same-day duplicate submission guard.

The guard is advisory: it reports the first same-day audit record that looks
like the candidate, and the caller decides whether to go ahead. The scan runs
outside the atomic unit, so two near-identical submissions racing each other
can both pass it.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from kasbook.database.base import Database
from kasbook.domain.entities import AuditRecord
from kasbook.domain.kinds import PAYMENT_KINDS, TransactionKind
from kasbook.utils.date_parser import start_of_day

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class DuplicateCandidate:
    """Identity of a transaction about to be recorded."""

    kind: TransactionKind
    counterparty_name: Optional[str]
    account_id: Optional[int]
    principal_amount: int


@dataclass(frozen=True)
class DuplicateCheck:
    """Outcome of a duplicate scan; ``match`` is None when nothing matched."""

    match: Optional[AuditRecord] = None

    @property
    def is_duplicate(self) -> bool:
        return self.match is not None


NO_DUPLICATE = DuplicateCheck()


def normalize_name(name: Optional[str]) -> str:
    """Lowercase a counterparty name and strip everything but letters and digits."""
    return _NON_ALPHANUMERIC.sub("", (name or "").lower())


def key_account_id(record: AuditRecord) -> Optional[int]:
    """Account that identifies a record for duplicate matching.

    Customer payments are keyed on the account the money left from; cash-out
    style records (withdrawals, EDC rental) on the account that received it.
    """
    if record.kind in PAYMENT_KINDS:
        return record.source_account_id
    return record.destination_account_id


def check_duplicate(
    candidate: DuplicateCandidate, same_day_records: Iterable[AuditRecord]
) -> DuplicateCheck:
    """Compare a candidate against already-recorded same-day audit records.

    A record matches when its kind, normalized counterparty name, key account
    and principal amount all equal the candidate's.

    Args:
        candidate: Transaction about to be recorded
        same_day_records: Audit records to compare against

    Returns:
        DuplicateCheck carrying the first matching record, if any
    """
    name = normalize_name(candidate.counterparty_name)
    for record in same_day_records:
        if (
            record.kind == candidate.kind
            and normalize_name(record.counterparty_name) == name
            and key_account_id(record) == candidate.account_id
            and record.principal_amount == candidate.principal_amount
        ):
            return DuplicateCheck(record)
    return NO_DUPLICATE


class DuplicateGuard:
    """Scans today's audit records for a probable double submission."""

    def __init__(self, db: Database):
        self.db = db

    def check(self, candidate: DuplicateCandidate, now: datetime) -> DuplicateCheck:
        """Check a candidate against records of its kind since local midnight.

        Storage failures never block a transaction: they are logged and the
        check reports no duplicate.
        """
        day_start = start_of_day(now)
        try:
            records = self.db.list_audit_records(
                kinds=[candidate.kind], start=day_start, end=day_start + timedelta(days=1)
            )
        except SQLAlchemyError as e:
            logger.warning("Duplicate scan for %s failed, continuing without it: %s", candidate.kind.value, e)
            return NO_DUPLICATE
        return check_duplicate(candidate, records)
