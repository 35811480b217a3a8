"""Borrower (loan) models."""

from dataclasses import dataclass, field
from decimal import Decimal

from loan_ledger.dates import DateLike
from loan_ledger.models.enums import (
    BorrowerStatus,
    InstallmentStatus,
    LoanType,
    PaymentStatus,
)


@dataclass
class Installment:
    """One monthly obligation of an installment loan."""

    month: int  # offset from the origination date, 1-based
    status: InstallmentStatus
    principal_amount: Decimal | None = None
    interest_amount: Decimal | None = None
    total_amount: Decimal | None = None


@dataclass
class FundingShare:
    """Part of a loan's principal contributed by one investor."""

    investor_id: str
    amount: Decimal


@dataclass
class Borrower:
    """Loan entity."""

    borrower_id: str
    office_id: str | None
    name: str
    loan_type: LoanType
    amount: Decimal  # principal
    status: BorrowerStatus
    date: DateLike  # origination
    due_date: DateLike = None  # grace-period loans only
    rate: Decimal | None = None  # annual %, installment loans only
    term: int | None = None  # years, installment loans only
    discount: Decimal | None = None  # grace-period loans only
    branch_id: str | None = None
    payment_status: PaymentStatus | None = None
    installments: list[Installment] = field(default_factory=list)
    funded_by: list[FundingShare] = field(default_factory=list)
    submitted_by: str | None = None
    rejection_reason: str | None = None
    paid_off_date: DateLike = None
    last_status_change: DateLike = None

    @property
    def funded_total(self) -> Decimal:
        """Sum of all funding shares."""
        return sum((share.amount for share in self.funded_by), Decimal("0"))

    def funding_for(self, investor_id: str) -> FundingShare | None:
        """Return the first funding share recorded for ``investor_id``."""
        for share in self.funded_by:
            if share.investor_id == investor_id:
                return share
        return None
