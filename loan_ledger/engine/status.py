"""Borrower status and remaining-time derivation.

Both entry points are pure functions of a borrower record and an explicit
evaluation date. They share the same priority skeleton:

1. pending / rejected approval states
2. fully paid (checked before any date logic)
3. grace-period loans: compare the single due date
4. installment loans: compare the due date of the earliest unsettled
   installment (smallest month offset)
5. fallback
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from loan_ledger.dates import add_months, days_between, parse_date, require_evaluation_day
from loan_ledger.exceptions import InvalidEntityStateError
from loan_ledger.models.borrower import Borrower, Installment
from loan_ledger.models.enums import (
    BorrowerStatus,
    InstallmentStatus,
    LoanType,
    PaymentStatus,
    Severity,
    StatusLabel,
)

UNSETTLED_INSTALLMENT_STATUSES = (InstallmentStatus.UNPAID, InstallmentStatus.LATE)

PAID_TEXT = "paid"
PLACEHOLDER_TEXT = "-"
INVALID_DATE_TEXT = "invalid date"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusDetails:
    """Displayable loan status."""

    label: str
    severity: Severity


@dataclass(frozen=True)
class RemainingDetails:
    """Time left until the next obligation."""

    text: str
    is_overdue: bool
    days: int | None = None  # signed: negative when overdue


def is_fully_paid(borrower: Borrower) -> bool:
    """A loan is settled when either the lifecycle or the payment status says so."""
    return borrower.status == BorrowerStatus.FULLY_PAID or borrower.payment_status == PaymentStatus.PAID


def next_unpaid_installment(installments: list[Installment]) -> Installment | None:
    """Return the unsettled installment with the smallest month offset.

    Raises
    ------
    InvalidEntityStateError
        If an unsettled installment has no usable month offset.
    """
    candidates = [inst for inst in installments or [] if inst.status in UNSETTLED_INSTALLMENT_STATUSES]
    for inst in candidates:
        if isinstance(inst.month, bool) or not isinstance(inst.month, int):
            raise InvalidEntityStateError(f"unsettled installment has unusable month {inst.month!r}")
    if not candidates:
        return None
    return min(candidates, key=lambda inst: inst.month)


def next_due_date(borrower: Borrower) -> date | None:
    """Due date of the borrower's next obligation, or ``None`` when unknown.

    Grace-period loans use ``due_date``; installment loans add the month
    offset of the earliest unsettled installment to the origination date.

    Raises
    ------
    InvalidEntityStateError
        If the installment schedule cannot produce a calendar date.
    """
    if borrower.loan_type == LoanType.GRACE_PERIOD:
        return parse_date(borrower.due_date)

    if borrower.loan_type == LoanType.INSTALLMENT:
        start = parse_date(borrower.date)
        installment = next_unpaid_installment(borrower.installments)
        if start is None or installment is None:
            return None
        try:
            return add_months(start, installment.month)
        except (ValueError, OverflowError) as e:
            raise InvalidEntityStateError(
                f"month {installment.month} from {start.isoformat()} is outside the calendar"
            ) from e

    return None


def _has_schedule(borrower: Borrower) -> bool:
    return bool(borrower.term) and bool(borrower.installments)


def derive_status(borrower: Borrower, evaluation_date: date | datetime) -> StatusDetails:
    """Derive the current status of a loan.

    Parameters
    ----------
    borrower : Borrower
        Loan record.
    evaluation_date : date | datetime
        The "current" moment; only its calendar day is used.

    Returns
    -------
    StatusDetails
        Exactly one label; never raises for bad record data.

    Raises
    ------
    MissingEvaluationDateError
        If ``evaluation_date`` is missing.
    """
    today = require_evaluation_day(evaluation_date)

    if borrower.status == BorrowerStatus.PENDING:
        return StatusDetails(StatusLabel.PENDING, Severity.INFO)
    if borrower.status == BorrowerStatus.REJECTED:
        return StatusDetails(StatusLabel.REJECTED, Severity.NEGATIVE)
    if is_fully_paid(borrower):
        return StatusDetails(StatusLabel.FULLY_PAID, Severity.POSITIVE)

    if borrower.loan_type == LoanType.GRACE_PERIOD:
        due = parse_date(borrower.due_date)
        if due is None:
            return StatusDetails(StatusLabel.INVALID_DATA, Severity.NEGATIVE)
        return _late_or_regular(due, today)

    if borrower.loan_type == LoanType.INSTALLMENT:
        if not _has_schedule(borrower) or parse_date(borrower.date) is None:
            return StatusDetails(StatusLabel.INCOMPLETE_DATA, Severity.INFO)
        try:
            due = next_due_date(borrower)
        except InvalidEntityStateError:
            logger.debug("Loan %s has an unusable schedule", borrower.borrower_id)
            return StatusDetails(StatusLabel.INVALID_DATA, Severity.NEGATIVE)
        if due is None:
            # every installment is settled but the loan was never marked paid
            return StatusDetails(StatusLabel.REGULAR, Severity.NEUTRAL)
        return _late_or_regular(due, today)

    return StatusDetails(_status_value(borrower.status), Severity.NEUTRAL)


def derive_remaining(borrower: Borrower, evaluation_date: date | datetime) -> RemainingDetails:
    """Describe the time left until the next obligation.

    Computed independently from :func:`derive_status`.

    Raises
    ------
    MissingEvaluationDateError
        If ``evaluation_date`` is missing.
    """
    today = require_evaluation_day(evaluation_date)

    if is_fully_paid(borrower):
        return RemainingDetails(PAID_TEXT, False)
    if borrower.status in (BorrowerStatus.PENDING, BorrowerStatus.REJECTED):
        return RemainingDetails(PLACEHOLDER_TEXT, False)

    if borrower.loan_type == LoanType.GRACE_PERIOD:
        due = parse_date(borrower.due_date)
        if due is None:
            return RemainingDetails(INVALID_DATE_TEXT, True)
        return _describe_days(days_between(due, today))

    if borrower.loan_type == LoanType.INSTALLMENT:
        if not _has_schedule(borrower):
            return RemainingDetails(PLACEHOLDER_TEXT, False)
        if parse_date(borrower.date) is None:
            return RemainingDetails(INVALID_DATE_TEXT, True)
        try:
            due = next_due_date(borrower)
        except InvalidEntityStateError:
            return RemainingDetails(INVALID_DATE_TEXT, True)
        if due is None:
            return RemainingDetails(PAID_TEXT, False)
        return _describe_days(days_between(due, today))

    return RemainingDetails(PLACEHOLDER_TEXT, False)


def _late_or_regular(due: date, today: date) -> StatusDetails:
    if due < today:
        return StatusDetails(StatusLabel.LATE, Severity.NEGATIVE)
    return StatusDetails(StatusLabel.REGULAR, Severity.NEUTRAL)


def _describe_days(days: int) -> RemainingDetails:
    if days < 0:
        return RemainingDetails(f"late by {_plural_days(-days)}", True, days)
    return RemainingDetails(_plural_days(days), False, days)


def _plural_days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def _status_value(status: object) -> str:
    return status.value if isinstance(status, BorrowerStatus) else str(status)
