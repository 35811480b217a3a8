"""Investor capital accounting.

Capital is kept in two independent buckets, keyed by
:class:`~loan_ledger.models.enums.CapitalSource` on the transaction side and
by :class:`~loan_ledger.models.enums.LoanType` on the loan side. Each bucket
partitions into active, defaulted and idle capital.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable

from loan_ledger.models.borrower import Borrower
from loan_ledger.models.enums import (
    BorrowerStatus,
    CapitalSource,
    Direction,
    LoanType,
    PaymentStatus,
    TransactionType,
)
from loan_ledger.models.investor import Investor, Transaction

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

DEFAULTED_PAYMENT_STATUSES = (PaymentStatus.DEFAULTED, PaymentStatus.LEGAL_ACTION)

_BUCKET_BY_LOAN_TYPE = {
    LoanType.INSTALLMENT: CapitalSource.INSTALLMENT,
    LoanType.GRACE_PERIOD: CapitalSource.GRACE,
}


class Participation(str, Enum):
    """How a funded loan counts against an investor's capital."""

    DEFAULTED = "DEFAULTED"
    SETTLED = "SETTLED"
    EXCLUDED = "EXCLUDED"  # pending approval or rejected
    ACTIVE = "ACTIVE"


@dataclass(frozen=True)
class CapitalBucket:
    """Capital for one source, split by deployment state."""

    deposits: Decimal = ZERO
    withdrawals: Decimal = ZERO
    active: Decimal = ZERO
    defaulted: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        """Net capital in the bucket."""
        return self.deposits - self.withdrawals

    @property
    def idle(self) -> Decimal:
        """Undeployed capital, never negative."""
        return max(ZERO, self.total - self.active - self.defaulted)


@dataclass(frozen=True)
class InvestorFinancials:
    """Capital snapshot for one investor."""

    investor_id: str
    installment: CapitalBucket
    grace: CapitalBucket
    unclassified_amount: Decimal = ZERO
    skipped_transactions: int = 0

    @property
    def total_installment_capital(self) -> Decimal:
        return self.installment.total

    @property
    def total_grace_capital(self) -> Decimal:
        return self.grace.total

    @property
    def active_installment_capital(self) -> Decimal:
        return self.installment.active

    @property
    def active_grace_capital(self) -> Decimal:
        return self.grace.active

    @property
    def defaulted_installment_funds(self) -> Decimal:
        return self.installment.defaulted

    @property
    def defaulted_grace_funds(self) -> Decimal:
        return self.grace.defaulted

    @property
    def idle_installment_capital(self) -> Decimal:
        return self.installment.idle

    @property
    def idle_grace_capital(self) -> Decimal:
        return self.grace.idle

    @property
    def active_capital(self) -> Decimal:
        return self.installment.active + self.grace.active

    @property
    def defaulted_funds(self) -> Decimal:
        return self.installment.defaulted + self.grace.defaulted

    @property
    def idle_capital(self) -> Decimal:
        return self.installment.idle + self.grace.idle

    @property
    def total_capital_in_system(self) -> Decimal:
        return self.installment.total + self.grace.total

    def bucket(self, source: CapitalSource) -> CapitalBucket:
        """Return the bucket for ``source``."""
        return self.installment if source == CapitalSource.INSTALLMENT else self.grace


def is_defaulted(borrower: Borrower) -> bool:
    """Loan has entered default or legal action."""
    return (
        borrower.status == BorrowerStatus.DEFAULTED
        or borrower.payment_status in DEFAULTED_PAYMENT_STATUSES
    )


def classify_participation(borrower: Borrower) -> Participation:
    """Classify a loan; defaulted beats settled beats pending/rejected."""
    if is_defaulted(borrower):
        return Participation.DEFAULTED
    if borrower.status == BorrowerStatus.FULLY_PAID or borrower.payment_status == PaymentStatus.PAID:
        return Participation.SETTLED
    if borrower.status in (BorrowerStatus.PENDING, BorrowerStatus.REJECTED):
        return Participation.EXCLUDED
    return Participation.ACTIVE


def classify_transaction(tx: object) -> tuple[CapitalSource, Direction, Decimal] | None:
    """Return ``(source, direction, amount)`` or ``None`` if unrecognized."""
    if not isinstance(tx, Transaction):
        return None
    amount = _to_amount(tx.amount)
    if amount is None:
        return None
    try:
        tx_type = TransactionType(tx.type)
        source = CapitalSource(tx.capital_source)
    except (ValueError, TypeError):
        return None
    return source, tx_type.direction, amount


def compute_financials(investor: Investor, borrowers: Iterable[Borrower]) -> InvestorFinancials:
    """Compute an investor's capital partition.

    Parameters
    ----------
    investor : Investor
        Investor whose transactions and funded loans are read.
    borrowers : Iterable[Borrower]
        Loan snapshot. Only loans listed in ``investor.funded_loan_ids``
        participate; ids with no matching record are ignored.

    Returns
    -------
    InvestorFinancials
        Best-effort snapshot; corrupt transactions are skipped.
    """
    totals = {
        (CapitalSource.INSTALLMENT, Direction.DEPOSIT): ZERO,
        (CapitalSource.INSTALLMENT, Direction.WITHDRAWAL): ZERO,
        (CapitalSource.GRACE, Direction.DEPOSIT): ZERO,
        (CapitalSource.GRACE, Direction.WITHDRAWAL): ZERO,
    }
    unclassified = ZERO
    skipped = 0

    for tx in investor.transaction_history or []:
        classified = classify_transaction(tx)
        if classified is None:
            skipped += 1
            amount = _to_amount(getattr(tx, "amount", None))
            if amount is not None:
                unclassified += amount
            logger.debug(
                "Skipping unclassified transaction %s for investor %s",
                getattr(tx, "transaction_id", "?"),
                investor.investor_id,
            )
            continue
        source, direction, amount = classified
        totals[(source, direction)] += amount

    deployed = {
        (CapitalSource.INSTALLMENT, Participation.ACTIVE): ZERO,
        (CapitalSource.INSTALLMENT, Participation.DEFAULTED): ZERO,
        (CapitalSource.GRACE, Participation.ACTIVE): ZERO,
        (CapitalSource.GRACE, Participation.DEFAULTED): ZERO,
    }

    for loan in _funded_loans(investor, borrowers):
        share = loan.funding_for(investor.investor_id)
        if share is None:
            logger.debug(
                "Loan %s lists no funding share for investor %s",
                loan.borrower_id,
                investor.investor_id,
            )
            continue
        source = _bucket_for_loan(loan)
        amount = _to_amount(share.amount)
        if source is None or amount is None:
            continue
        participation = classify_participation(loan)
        if participation in (Participation.ACTIVE, Participation.DEFAULTED):
            deployed[(source, participation)] += amount

    def bucket(source: CapitalSource) -> CapitalBucket:
        return CapitalBucket(
            deposits=totals[(source, Direction.DEPOSIT)],
            withdrawals=totals[(source, Direction.WITHDRAWAL)],
            active=deployed[(source, Participation.ACTIVE)],
            defaulted=deployed[(source, Participation.DEFAULTED)],
        )

    return InvestorFinancials(
        investor_id=investor.investor_id,
        installment=bucket(CapitalSource.INSTALLMENT),
        grace=bucket(CapitalSource.GRACE),
        unclassified_amount=unclassified,
        skipped_transactions=skipped,
    )


def recompute_investor(investor: Investor, borrowers: Iterable[Borrower]) -> Investor:
    """Return a copy of ``investor`` with its cached balances refreshed.

    ``defaulted_funds`` and ``amount`` (idle balance) are set from a fresh
    :func:`compute_financials`; the input record is left untouched.
    """
    financials = compute_financials(investor, borrowers)
    return replace(
        investor,
        defaulted_funds=financials.defaulted_funds,
        amount=financials.idle_capital,
    )


def _funded_loans(investor: Investor, borrowers: Iterable[Borrower]) -> list[Borrower]:
    funded_ids = set(investor.funded_loan_ids or [])
    if not funded_ids:
        return []
    seen: set[str] = set()
    loans = []
    for loan in borrowers:
        if loan.borrower_id in funded_ids and loan.borrower_id not in seen:
            seen.add(loan.borrower_id)
            loans.append(loan)
    return loans


def _bucket_for_loan(loan: Borrower) -> CapitalSource | None:
    try:
        return _BUCKET_BY_LOAN_TYPE[LoanType(loan.loan_type)]
    except (ValueError, TypeError, KeyError):
        return None


def _to_amount(value: object) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount
