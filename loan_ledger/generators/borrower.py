"""Borrower (loan) generator."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterator

from loan_ledger.calculator import build_installment_schedule
from loan_ledger.config import ProfitConfig
from loan_ledger.dates import add_months
from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models import Borrower, FundingShare
from loan_ledger.models.enums import (
    BorrowerStatus,
    InstallmentStatus,
    LoanType,
    PaymentStatus,
)


class BorrowerGenerator(BaseGenerator):
    """Generate synthetic installment and grace-period loans."""

    STATUSES = [
        BorrowerStatus.REGULAR,
        BorrowerStatus.LATE,
        BorrowerStatus.FULLY_PAID,
        BorrowerStatus.DEFAULTED,
        BorrowerStatus.PENDING,
        BorrowerStatus.REJECTED,
    ]
    STATUS_WEIGHTS = [0.55, 0.12, 0.12, 0.06, 0.10, 0.05]

    TERMS_YEARS = [1, 2, 3]
    GRACE_MONTHS = [3, 6, 12]

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        as_of: date | None = None,
        config: ProfitConfig | None = None,
    ) -> None:
        super().__init__(seed, locale, as_of)
        self.config = config or ProfitConfig()

    def generate(
        self,
        office_id: str,
        loan_type: LoanType | None = None,
        status: BorrowerStatus | None = None,
        funded_by: list[FundingShare] | None = None,
        amount: Decimal | None = None,
    ) -> Borrower:
        """Generate a single loan.

        Parameters
        ----------
        office_id : str
            Office the loan belongs to.
        loan_type : LoanType | None
            Loan type; random when omitted.
        status : BorrowerStatus | None
            Lifecycle status; weighted random when omitted.
        funded_by : list[FundingShare] | None
            Funding shares. They are not checked against ``amount``.
        amount : Decimal | None
            Principal; random multiple of 1000 when omitted.

        Returns
        -------
        Borrower
            Generated loan, with dates and installments consistent with
            ``status`` as of the generator's reference day.
        """
        if loan_type is None:
            loan_type = self.rng.choice(list(LoanType))
        if status is None:
            status = self.rng.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]
        if amount is None:
            amount = Decimal(self.rng.randint(5, 200) * 1000)

        borrower = Borrower(
            borrower_id=self._new_id(),
            office_id=office_id,
            name=self.fake.name(),
            loan_type=loan_type,
            amount=amount,
            status=status,
            date=self.as_of,
            funded_by=list(funded_by or []),
        )

        if loan_type == LoanType.INSTALLMENT:
            self._fill_installment_loan(borrower)
        else:
            self._fill_grace_loan(borrower)

        if status == BorrowerStatus.REJECTED:
            borrower.rejection_reason = self.rng.choice(
                ["Insufficient guarantees", "Incomplete documents", "Exceeds office limits"]
            )
        return borrower

    def generate_batch(self, office_id: str, count: int) -> Iterator[Borrower]:
        """Generate multiple unfunded loans.

        Parameters
        ----------
        office_id : str
            Office the loans belong to.
        count : int
            Number of loans to generate.

        Yields
        ------
        Borrower
            Generated loans.
        """
        for _ in range(count):
            yield self.generate(office_id)

    def _fill_installment_loan(self, borrower: Borrower) -> None:
        """Set rate, term, origination and a schedule matching the status."""
        borrower.rate = Decimal(str(self.config.base_interest_rate))
        borrower.term = self.rng.choice(self.TERMS_YEARS)

        if borrower.status in (BorrowerStatus.PENDING, BorrowerStatus.REJECTED):
            borrower.date = self._past_day(0, 20)
            borrower.installments = build_installment_schedule(
                borrower.amount, borrower.rate, borrower.term
            )
            return

        if borrower.status == BorrowerStatus.FULLY_PAID:
            # whole term already elapsed
            borrower.date = add_months(self._past_day(10, 200), -borrower.term * 12)
        else:
            borrower.date = self._past_day(45, 330)
        borrower.installments = build_installment_schedule(
            borrower.amount, borrower.rate, borrower.term
        )
        self._apply_payments(borrower)

    def _apply_payments(self, borrower: Borrower) -> None:
        """Mark installments paid or late according to the loan status."""
        due_months = [
            inst for inst in borrower.installments if add_months(borrower.date, inst.month) < self.as_of
        ]

        if borrower.status == BorrowerStatus.FULLY_PAID:
            for inst in borrower.installments:
                inst.status = InstallmentStatus.PAID
            borrower.payment_status = PaymentStatus.PAID
            borrower.paid_off_date = add_months(borrower.date, len(borrower.installments))
            return

        if borrower.status == BorrowerStatus.REGULAR:
            for inst in due_months:
                inst.status = InstallmentStatus.PAID
            borrower.payment_status = PaymentStatus.REGULAR
            return

        # LATE and DEFAULTED loans stop paying part way through
        missed = 1 if borrower.status == BorrowerStatus.LATE else max(3, len(due_months) // 2)
        missed = min(missed, len(due_months))
        for inst in due_months[: len(due_months) - missed]:
            inst.status = InstallmentStatus.PAID
        for inst in due_months[len(due_months) - missed :]:
            inst.status = InstallmentStatus.LATE

        if borrower.status == BorrowerStatus.DEFAULTED:
            borrower.payment_status = PaymentStatus.DEFAULTED
        else:
            borrower.payment_status = PaymentStatus.LATE_ONE_INSTALLMENT

    def _fill_grace_loan(self, borrower: Borrower) -> None:
        """Set origination, due date and discount matching the status."""
        months = self.rng.choice(self.GRACE_MONTHS)
        if self.rng.random() < 0.3:
            borrower.discount = Decimal(self.rng.randint(1, 10) * 100)

        if borrower.status == BorrowerStatus.LATE:
            due = self._past_day(1, 60)
        elif borrower.status == BorrowerStatus.DEFAULTED:
            due = self._past_day(90, 240)
            borrower.payment_status = PaymentStatus.DEFAULTED
        elif borrower.status == BorrowerStatus.FULLY_PAID:
            due = self._past_day(1, 180)
            borrower.payment_status = PaymentStatus.PAID
            borrower.paid_off_date = due
        else:
            due = add_months(self.as_of, self.rng.randint(1, months))
            if borrower.status == BorrowerStatus.REGULAR:
                borrower.payment_status = PaymentStatus.REGULAR

        borrower.date = add_months(due, -months)
        borrower.due_date = due
