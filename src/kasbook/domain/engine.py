"""Ledger transaction engine.

Every balance-changing business transaction goes through ``apply_postings``:
inside one atomic unit it re-reads the touched accounts, re-checks that the
funding accounts can cover their debits, writes the audit record, appends
one ledger entry per posting with sequential before/after snapshots and
stores the new balances. Operations differ only in the postings they plan.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from kasbook.database.base import DEFAULT_MAX_ATTEMPTS, Database, LedgerUnit
from kasbook.domain.account import AccountService
from kasbook.domain.duplicates import DuplicateCandidate, DuplicateGuard
from kasbook.domain.entities import (
    Account,
    AccountRole,
    EntryType,
    FeePaymentMethod,
    OperatorContext,
    PaymentMethod,
    Receipt,
)
from kasbook.domain.errors import (
    AccountNotFound,
    DuplicateDetected,
    InsufficientBalance,
    InvalidSplit,
    RequiredAccountMissing,
    ValidationError,
)
from kasbook.domain.fees import EDC_SERVICE_FEE, mdr_fee
from kasbook.domain.kinds import PAYMENT_KINDS, WITHDRAWAL_KINDS, TransactionKind

logger = logging.getLogger(__name__)

# Memo of the drawer top-up made when a shift opens; not counted as capital.
SHIFT_OPENING_CAPITAL = "Modal Awal Shift"

DEFAULT_COUNTERPARTY = "Pelanggan"

MEMO_LABELS: dict[TransactionKind, str] = {
    TransactionKind.CUSTOMER_TRANSFER: "Trf",
    TransactionKind.CUSTOMER_TOP_UP: "Top Up",
    TransactionKind.CUSTOMER_EMONEY_TOP_UP: "Top Up E-Money",
    TransactionKind.CUSTOMER_VA_PAYMENT: "VA",
    TransactionKind.PPOB_PURCHASE: "PPOB",
    TransactionKind.PPOB_PLN_POSTPAID: "Tagihan PLN",
    TransactionKind.PPOB_PDAM: "Tagihan PDAM",
    TransactionKind.PPOB_BPJS: "Tagihan BPJS",
    TransactionKind.PPOB_WIFI: "Tagihan Wifi",
    TransactionKind.PPOB_PAKET_TELPON: "Paket Telpon",
    TransactionKind.CUSTOMER_WITHDRAWAL: "Tarik Tunai",
    TransactionKind.CUSTOMER_KJP_WITHDRAWAL: "Tarik Tunai KJP",
}


@dataclass(frozen=True)
class Posting:
    """One planned balance movement inside an atomic unit."""

    account_id: int
    entry_type: EntryType
    amount: int
    name: str
    category: str
    counterparty_label: Optional[str] = None


@dataclass(frozen=True)
class TransactionRequest:
    """A customer payment: transfer, top-up, VA payment or PPOB purchase.

    ``principal_amount`` and ``fee_amount`` leave the source account;
    the customer pays ``principal_amount + service_fee`` into the
    collecting account(s) chosen by ``payment_method``.
    """

    kind: TransactionKind
    source_account_id: int
    principal_amount: int
    payment_method: PaymentMethod = PaymentMethod.TUNAI
    service_fee: int = 0
    fee_amount: int = 0
    cashback_amount: int = 0
    split_cash_amount: int = 0
    transfer_account_id: Optional[int] = None
    counterparty_name: Optional[str] = None
    counterparty_detail: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def total_collected(self) -> int:
        """What the customer pays the kiosk."""
        return self.principal_amount + self.service_fee

    @property
    def total_debited(self) -> int:
        """What leaves the source account before any cashback."""
        return self.principal_amount + self.fee_amount

    @property
    def split_transfer_amount(self) -> int:
        """Transfer portion of a split payment."""
        return self.total_collected - self.split_cash_amount

    @property
    def profit(self) -> int:
        return self.service_fee - self.fee_amount + self.cashback_amount


@dataclass(frozen=True)
class WithdrawalRequest:
    """A customer cash withdrawal, or a KJP card withdrawal.

    The customer transfers ``amount`` into the destination account and gets
    cash from the drawer. With ``FeePaymentMethod.TUNAI`` the fee is paid in
    cash on top; with ``DIPOTONG`` it is deducted from the cash handed out.
    """

    amount: int
    service_fee: int = 0
    fee_payment_method: FeePaymentMethod = FeePaymentMethod.TUNAI
    destination_account_id: Optional[int] = None
    kind: TransactionKind = TransactionKind.CUSTOMER_WITHDRAWAL
    counterparty_name: Optional[str] = None
    counterparty_detail: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def cash_handed_out(self) -> int:
        if self.fee_payment_method == FeePaymentMethod.DIPOTONG:
            return self.amount - self.service_fee
        return self.amount


def _require_amount(label: str, value: Any, positive: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be a whole Rupiah amount, got {value!r}")
    if positive and value <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    if value < 0:
        raise ValidationError(f"{label} cannot be negative")


def validate_request(request: TransactionRequest) -> None:
    """Check the shape of a payment request without touching storage.

    Raises:
        ValidationError: If the kind is not a payment kind or an amount is invalid
        InvalidSplit: If a split payment has a bad cash portion or no transfer target
    """
    if request.kind not in PAYMENT_KINDS:
        raise ValidationError(f"'{request.kind.value}' is not a customer payment kind")
    _require_amount("Principal amount", request.principal_amount, positive=True)
    _require_amount("Fee", request.fee_amount)
    _require_amount("Service fee", request.service_fee)
    _require_amount("Cashback", request.cashback_amount)
    _require_amount("Split cash amount", request.split_cash_amount)

    method = PaymentMethod(request.payment_method)
    if method == PaymentMethod.TRANSFER and request.transfer_account_id is None:
        raise ValidationError("Transfer payment needs an account to receive the transfer")
    if method == PaymentMethod.SPLIT:
        if request.transfer_account_id is None:
            raise InvalidSplit("Split payment needs an account to receive the transfer portion")
        total = request.total_collected
        if not 0 < request.split_cash_amount < total:
            raise InvalidSplit(
                f"Cash portion of a split payment must be more than 0 and less than {total}, "
                f"got {request.split_cash_amount}"
            )


def plan_collection(
    request: TransactionRequest, drawer_id: Optional[int]
) -> list[tuple[int, int, str]]:
    """Return ``(account_id, amount, memo)`` credits collecting the customer's payment.

    The amounts always add up to ``principal_amount + service_fee``.
    """
    method = PaymentMethod(request.payment_method)
    total = request.total_collected
    if method == PaymentMethod.TUNAI:
        return [(drawer_id, total, "Bayar")]
    if method == PaymentMethod.TRANSFER:
        return [(request.transfer_account_id, total, "Bayar")]
    return [
        (drawer_id, request.split_cash_amount, "Bayar Tunai"),
        (request.transfer_account_id, request.split_transfer_amount, "Bayar Transfer"),
    ]


def apply_postings(
    unit: LedgerUnit,
    kind: TransactionKind,
    date: datetime,
    device_name: Optional[str],
    audit_fields: dict[str, Any],
    postings: list[Posting],
    funding: Optional[dict[int, int]] = None,
    roles: Optional[dict[int, AccountRole]] = None,
) -> Receipt:
    """Apply a business transaction inside an atomic unit.

    Args:
        unit: Open atomic unit
        kind: Kind of the audit record to create
        date: Timestamp shared by the audit record and every entry
        device_name: Operator device stamped on every row
        audit_fields: Business columns of the audit record
        postings: Movements to apply, in order
        funding: Minimum balance each account must hold before any posting
        roles: Role an account was resolved from, for error reporting

    Returns:
        Receipt with the audit record, the new entries and the new balances

    Raises:
        AccountNotFound: If a touched account no longer exists
        RequiredAccountMissing: If a role account no longer exists
        InsufficientBalance: If a funding account cannot cover its debits
    """
    funding = funding or {}
    roles = roles or {}

    accounts: dict[int, Account] = {}
    for account_id in [p.account_id for p in postings] + list(funding):
        if account_id in accounts:
            continue
        account = unit.get_account(account_id)
        if account is None:
            if account_id in roles:
                raise RequiredAccountMissing(roles[account_id])
            raise AccountNotFound(account_id)
        accounts[account_id] = account

    for account_id, required in funding.items():
        account = accounts[account_id]
        if account.balance < required:
            raise InsufficientBalance(account.label, account.balance, required)

    audit = unit.add_audit_record(kind, date, device_name, **audit_fields)

    running = {account_id: account.balance for account_id, account in accounts.items()}
    entries = []
    for posting in postings:
        before = running[posting.account_id]
        if posting.entry_type == EntryType.CREDIT:
            after = before + posting.amount
        else:
            after = before - posting.amount
        entries.append(
            unit.add_ledger_entry(
                account_id=posting.account_id,
                entry_type=posting.entry_type,
                name=posting.name,
                amount=posting.amount,
                balance_before=before,
                balance_after=after,
                date=date,
                category=posting.category,
                device_name=device_name,
                counterparty_label=posting.counterparty_label,
                audit_id=audit.id,
            )
        )
        running[posting.account_id] = after

    for account_id, balance in running.items():
        if balance != accounts[account_id].balance:
            unit.set_balance(account_id, balance)

    return Receipt(audit=audit, entries=tuple(entries), balances=running)


class TransactionEngine:
    """Records business transactions as atomic multi-account postings."""

    def __init__(
        self,
        db: Database,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        duplicate_guard: Optional[DuplicateGuard] = None,
    ):
        """Initialize the engine.

        Args:
            db: Database instance
            max_attempts: Attempts per atomic unit before giving up
            duplicate_guard: Same-day duplicate scanner; one over ``db`` by default
        """
        self.db = db
        self.accounts = AccountService(db)
        self.max_attempts = max_attempts
        self.duplicate_guard = duplicate_guard or DuplicateGuard(db)

    def _commit(
        self,
        kind: TransactionKind,
        context: OperatorContext,
        work: Callable[[LedgerUnit], Optional[Receipt]],
    ) -> Optional[Receipt]:
        receipt = self.db.run_in_transaction(work, self.max_attempts)
        if receipt is not None:
            logger.info(
                "Recorded %s as audit %d from %s", kind.value, receipt.audit_id, context.device_name
            )
        return receipt

    def _check_duplicate(self, candidate: DuplicateCandidate, context: OperatorContext) -> None:
        check = self.duplicate_guard.check(candidate, context.now())
        if check.is_duplicate:
            raise DuplicateDetected(check.match)

    def _require_funds(self, account: Account, required: int) -> None:
        # Pre-flight only; apply_postings re-checks inside the unit.
        if account.balance < required:
            raise InsufficientBalance(account.label, account.balance, required)

    def execute(
        self, request: TransactionRequest, context: OperatorContext, force: bool = False
    ) -> Receipt:
        """Record a customer payment.

        Args:
            request: Payment to record
            context: Operator device and clock
            force: Skip the same-day duplicate check

        Returns:
            Receipt of the committed transaction

        Raises:
            ValidationError: If the request is malformed
            InvalidSplit: If the split portions are invalid
            AccountNotFound: If the source or transfer account does not exist
            RequiredAccountMissing: If cash is collected and no drawer is bound
            InsufficientBalance: If the source cannot cover principal plus fee
            DuplicateDetected: If a same-day record matches and force is False
            TransactionAborted: If the store could not commit
        """
        validate_request(request)
        kind = request.kind
        method = PaymentMethod(request.payment_method)

        source = self.accounts.require_account(request.source_account_id)
        drawer_id = None
        if method in (PaymentMethod.TUNAI, PaymentMethod.SPLIT):
            drawer_id = self.accounts.resolve_role(AccountRole.CASH_DRAWER).id
        if method in (PaymentMethod.TRANSFER, PaymentMethod.SPLIT):
            self.accounts.require_account(request.transfer_account_id)
        self._require_funds(source, request.total_debited)

        if not force:
            self._check_duplicate(
                DuplicateCandidate(kind, request.counterparty_name, source.id, request.principal_amount),
                context,
            )

        label = MEMO_LABELS[kind]
        who = request.counterparty_name or DEFAULT_COUNTERPARTY
        postings = [
            Posting(
                source.id,
                EntryType.DEBIT,
                request.principal_amount,
                f"{label} an. {who}",
                kind.category("debit"),
                request.counterparty_detail,
            )
        ]
        if request.fee_amount:
            postings.append(
                Posting(
                    source.id,
                    EntryType.DEBIT,
                    request.fee_amount,
                    f"Biaya Admin {label} an. {who}",
                    kind.category("fee"),
                    "Biaya Bank",
                )
            )
        if request.cashback_amount:
            postings.append(
                Posting(
                    source.id,
                    EntryType.CREDIT,
                    request.cashback_amount,
                    f"Cashback {label}",
                    kind.category("cashback"),
                    source.label,
                )
            )
        for account_id, amount, memo in plan_collection(request, drawer_id):
            postings.append(
                Posting(
                    account_id,
                    EntryType.CREDIT,
                    amount,
                    f"{memo} {label} an. {who}",
                    kind.category("payment"),
                    DEFAULT_COUNTERPARTY,
                )
            )

        if method == PaymentMethod.TUNAI:
            cash_amount, transfer_amount = request.total_collected, 0
        elif method == PaymentMethod.TRANSFER:
            cash_amount, transfer_amount = 0, request.total_collected
        else:
            cash_amount, transfer_amount = request.split_cash_amount, request.split_transfer_amount

        audit_fields = dict(
            source_account_id=source.id,
            counterparty_name=request.counterparty_name,
            counterparty_detail=request.counterparty_detail,
            principal_amount=request.principal_amount,
            service_fee=request.service_fee,
            admin_fee=request.fee_amount,
            cashback=request.cashback_amount,
            profit=request.profit,
            payment_method=method,
            cash_amount=cash_amount,
            transfer_account_id=request.transfer_account_id,
            transfer_amount=transfer_amount,
            details=dict(request.details),
        )
        funding = {source.id: request.total_debited}
        roles = {drawer_id: AccountRole.CASH_DRAWER} if drawer_id is not None else {}
        now = context.now()

        def work(unit: LedgerUnit) -> Receipt:
            return apply_postings(
                unit, kind, now, context.device_name, audit_fields, postings, funding, roles
            )

        return self._commit(kind, context, work)

    def withdraw_cash(
        self, request: WithdrawalRequest, context: OperatorContext, force: bool = False
    ) -> Receipt:
        """Record a customer cash withdrawal or KJP withdrawal.

        The destination account is credited with the withdrawal amount and
        the drawer pays out the cash. KJP withdrawals default to the account
        bound to the ``KJP_AGENT`` role.

        Raises:
            ValidationError: If amounts are invalid or no destination is given
            RequiredAccountMissing: If the drawer (or KJP agent) role is unbound
            InsufficientBalance: If the drawer cannot cover the cash handed out
            DuplicateDetected: If a same-day record matches and force is False
        """
        kind = request.kind
        if kind not in WITHDRAWAL_KINDS:
            raise ValidationError(f"'{kind.value}' is not a withdrawal kind")
        _require_amount("Withdrawal amount", request.amount, positive=True)
        _require_amount("Service fee", request.service_fee)
        fee_method = FeePaymentMethod(request.fee_payment_method)
        if fee_method == FeePaymentMethod.DIPOTONG and request.service_fee >= request.amount:
            raise ValidationError("A deducted service fee must be less than the withdrawal amount")

        roles: dict[int, AccountRole] = {}
        if request.destination_account_id is not None:
            destination = self.accounts.require_account(request.destination_account_id)
        elif kind == TransactionKind.CUSTOMER_KJP_WITHDRAWAL:
            destination = self.accounts.resolve_role(AccountRole.KJP_AGENT)
            roles[destination.id] = AccountRole.KJP_AGENT
        else:
            raise ValidationError("Withdrawal needs an account to receive the customer's transfer")
        drawer = self.accounts.resolve_role(AccountRole.CASH_DRAWER)
        roles[drawer.id] = AccountRole.CASH_DRAWER
        if destination.id == drawer.id:
            raise ValidationError("The cash drawer cannot receive the customer's transfer")
        self._require_funds(drawer, request.cash_handed_out)

        if not force:
            self._check_duplicate(
                DuplicateCandidate(kind, request.counterparty_name, destination.id, request.amount),
                context,
            )

        label = MEMO_LABELS[kind]
        who = request.counterparty_name or DEFAULT_COUNTERPARTY
        postings = [
            Posting(
                destination.id,
                EntryType.CREDIT,
                request.amount,
                f"Trf Masuk {label} a/n {who}",
                kind.category("credit"),
                request.counterparty_detail,
            )
        ]
        if fee_method == FeePaymentMethod.TUNAI:
            postings.append(
                Posting(drawer.id, EntryType.DEBIT, request.amount, f"{label} a/n {who}", kind.category("debit"), who)
            )
            if request.service_fee:
                postings.append(
                    Posting(
                        drawer.id,
                        EntryType.CREDIT,
                        request.service_fee,
                        f"Biaya Jasa {label} a/n {who}",
                        kind.category("service_fee"),
                        "Pendapatan Jasa",
                    )
                )
        else:
            postings.append(
                Posting(
                    drawer.id,
                    EntryType.DEBIT,
                    request.cash_handed_out,
                    f"{label} a/n {who} (Fee Dipotong)",
                    kind.category("debit"),
                    who,
                )
            )

        audit_fields = dict(
            source_account_id=drawer.id,
            destination_account_id=destination.id,
            counterparty_name=request.counterparty_name,
            counterparty_detail=request.counterparty_detail,
            principal_amount=request.amount,
            service_fee=request.service_fee,
            profit=request.service_fee,
            cash_amount=request.cash_handed_out,
            details={"feePaymentMethod": fee_method.value, **request.details},
        )
        funding = {drawer.id: request.cash_handed_out}
        now = context.now()

        def work(unit: LedgerUnit) -> Receipt:
            return apply_postings(
                unit, kind, now, context.device_name, audit_fields, postings, funding, roles
            )

        return self._commit(kind, context, work)

    def record_edc_service(
        self,
        customer_name: str,
        context: OperatorContext,
        service_fee: int = EDC_SERVICE_FEE,
        machine_used: Optional[str] = None,
        force: bool = False,
    ) -> Receipt:
        """Record an EDC machine rental paid in cash into the drawer."""
        kind = TransactionKind.EDC_SERVICE
        _require_amount("Service fee", service_fee, positive=True)
        drawer = self.accounts.resolve_role(AccountRole.CASH_DRAWER)
        if not force:
            self._check_duplicate(DuplicateCandidate(kind, customer_name, drawer.id, 0), context)

        who = customer_name or DEFAULT_COUNTERPARTY
        postings = [
            Posting(drawer.id, EntryType.CREDIT, service_fee, f"Jasa EDC a/n {who}", kind.category("income"), who)
        ]
        details = {"machineUsed": machine_used} if machine_used else {}
        audit_fields = dict(
            destination_account_id=drawer.id,
            counterparty_name=customer_name,
            service_fee=service_fee,
            profit=service_fee,
            payment_method=PaymentMethod.TUNAI,
            cash_amount=service_fee,
            details=details,
        )
        roles = {drawer.id: AccountRole.CASH_DRAWER}
        now = context.now()

        def work(unit: LedgerUnit) -> Receipt:
            return apply_postings(unit, kind, now, context.device_name, audit_fields, postings, roles=roles)

        return self._commit(kind, context, work)

    def transfer_between_accounts(
        self,
        source_account_id: int,
        destination_account_id: int,
        amount: int,
        context: OperatorContext,
        admin_fee: int = 0,
        description: Optional[str] = None,
    ) -> Receipt:
        """Move balance between two kas accounts, paying an optional admin fee from the source."""
        kind = TransactionKind.INTERNAL_TRANSFER
        _require_amount("Transfer amount", amount, positive=True)
        _require_amount("Admin fee", admin_fee)
        if source_account_id == destination_account_id:
            raise ValidationError("Source and destination accounts must differ")
        source = self.accounts.require_account(source_account_id)
        destination = self.accounts.require_account(destination_account_id)
        self._require_funds(source, amount + admin_fee)

        postings = [
            Posting(
                source.id,
                EntryType.DEBIT,
                amount,
                description or f"Transfer ke: {destination.label}",
                kind.category("debit"),
                destination.label,
            ),
            Posting(
                destination.id,
                EntryType.CREDIT,
                amount,
                description or f"Transfer dari: {source.label}",
                kind.category("credit"),
                source.label,
            ),
        ]
        if admin_fee:
            postings.insert(
                1,
                Posting(
                    source.id,
                    EntryType.DEBIT,
                    admin_fee,
                    f"Biaya Admin Transfer ke: {destination.label}",
                    kind.category("fee"),
                    "Biaya Bank",
                ),
            )
        audit_fields = dict(
            source_account_id=source.id,
            destination_account_id=destination.id,
            counterparty_name=description,
            principal_amount=amount,
            admin_fee=admin_fee,
        )
        funding = {source.id: amount + admin_fee}
        now = context.now()

        def work(unit: LedgerUnit) -> Receipt:
            return apply_postings(unit, kind, now, context.device_name, audit_fields, postings, funding)

        return self._commit(kind, context, work)

    def settle_merchant(
        self,
        merchant_account_id: int,
        context: OperatorContext,
        destination_account_id: Optional[int] = None,
    ) -> Receipt:
        """Settle a merchant account's whole balance, net of MDR, into its destination.

        The gross amount is the merchant balance read inside the atomic unit,
        so payments landing between pre-flight and commit are settled too.

        Raises:
            ValidationError: If no destination is configured or nothing is left to settle
        """
        kind = TransactionKind.SETTLEMENT
        merchant = self.accounts.require_account(merchant_account_id)
        destination_id = destination_account_id or merchant.settlement_destination_id
        if destination_id is None:
            raise ValidationError(f"Account '{merchant.label}' has no settlement destination")
        if destination_id == merchant.id:
            raise ValidationError("A merchant account cannot settle into itself")
        destination = self.accounts.require_account(destination_id)
        now = context.now()

        def work(unit: LedgerUnit) -> Receipt:
            current = unit.get_account(merchant.id)
            if current is None:
                raise AccountNotFound(merchant.id)
            gross = current.balance
            if gross <= 0:
                raise ValidationError(f"Account '{current.label}' has no balance to settle")
            mdr = mdr_fee(gross)
            net = gross - mdr
            postings = [
                Posting(
                    merchant.id,
                    EntryType.DEBIT,
                    gross,
                    f"Settlement ke {destination.label}",
                    kind.category("debit"),
                    "Internal",
                ),
                Posting(
                    destination.id,
                    EntryType.CREDIT,
                    net,
                    f"Settlement dari {current.label}",
                    kind.category("credit"),
                    "Internal",
                ),
            ]
            audit_fields = dict(
                source_account_id=merchant.id,
                destination_account_id=destination.id,
                principal_amount=gross,
                admin_fee=mdr,
                details={"mdrFee": mdr, "netAmount": net},
            )
            return apply_postings(
                unit, kind, now, context.device_name, audit_fields, postings, {merchant.id: gross}
            )

        return self._commit(kind, context, work)

    def _single_posting(
        self,
        kind: TransactionKind,
        account_id: int,
        entry_type: EntryType,
        amount: int,
        name: str,
        context: OperatorContext,
        counterparty_name: Optional[str] = None,
    ) -> Receipt:
        account = self.accounts.require_account(account_id)
        funding = {}
        if entry_type == EntryType.DEBIT:
            self._require_funds(account, amount)
            funding[account.id] = amount
        postings = [Posting(account.id, entry_type, amount, name, kind.category(entry_type.value))]
        audit_fields = dict(principal_amount=amount, counterparty_name=counterparty_name)
        if entry_type == EntryType.DEBIT:
            audit_fields["source_account_id"] = account.id
        else:
            audit_fields["destination_account_id"] = account.id
        now = context.now()

        def work(unit: LedgerUnit) -> Receipt:
            return apply_postings(unit, kind, now, context.device_name, audit_fields, postings, funding)

        return self._commit(kind, context, work)

    def add_capital(
        self,
        account_id: int,
        amount: int,
        context: OperatorContext,
        description: Optional[str] = None,
    ) -> Receipt:
        """Credit fresh capital into an account."""
        _require_amount("Capital amount", amount, positive=True)
        return self._single_posting(
            TransactionKind.CAPITAL_ADDITION,
            account_id,
            EntryType.CREDIT,
            amount,
            description or "Tambah Modal",
            context,
            description,
        )

    def withdraw_capital(
        self,
        account_id: int,
        amount: int,
        context: OperatorContext,
        description: Optional[str] = None,
    ) -> Receipt:
        """Take capital out of an account."""
        _require_amount("Capital amount", amount, positive=True)
        return self._single_posting(
            TransactionKind.CAPITAL_WITHDRAWAL,
            account_id,
            EntryType.DEBIT,
            amount,
            description or "Tarik Modal",
            context,
            description,
        )

    def record_operational_cost(
        self, account_id: int, amount: int, purpose: str, context: OperatorContext
    ) -> Receipt:
        """Pay an operational expense out of an account."""
        _require_amount("Cost amount", amount, positive=True)
        purpose = (purpose or "").strip()
        if not purpose:
            raise ValidationError("Operational cost needs a purpose")
        return self._single_posting(
            TransactionKind.OPERATIONAL_COST,
            account_id,
            EntryType.DEBIT,
            amount,
            purpose,
            context,
            purpose,
        )

    def adjust_balance(
        self,
        account_id: int,
        actual_balance: int,
        context: OperatorContext,
        reason: Optional[str] = None,
    ) -> Optional[Receipt]:
        """Set an account to its counted balance by posting the difference.

        Returns:
            Receipt, or None when the stored balance already matches
        """
        kind = TransactionKind.BALANCE_ADJUSTMENT
        _require_amount("Actual balance", actual_balance)
        self.accounts.require_account(account_id)
        name = reason or "Penyesuaian Saldo"
        now = context.now()

        def work(unit: LedgerUnit) -> Optional[Receipt]:
            account = unit.get_account(account_id)
            if account is None:
                raise AccountNotFound(account_id)
            difference = actual_balance - account.balance
            if difference == 0:
                return None
            entry_type = EntryType.CREDIT if difference > 0 else EntryType.DEBIT
            postings = [Posting(account_id, entry_type, abs(difference), name, kind.category(entry_type.value))]
            audit_fields = dict(
                source_account_id=account_id if difference < 0 else None,
                destination_account_id=account_id if difference > 0 else None,
                counterparty_name=reason,
                principal_amount=abs(difference),
                details={"previousBalance": account.balance, "actualBalance": actual_balance},
            )
            return apply_postings(unit, kind, now, context.device_name, audit_fields, postings)

        receipt = self._commit(kind, context, work)
        if receipt is None:
            logger.info("Balance of account %d already matches %d; nothing adjusted", account_id, actual_balance)
        return receipt
