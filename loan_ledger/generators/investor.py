"""Investor and capital transaction generator."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator

from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models import Investor, Transaction
from loan_ledger.models.enums import (
    CapitalSource,
    InvestorStatus,
    TransactionType,
    WithdrawalMethod,
)


class InvestorGenerator(BaseGenerator):
    """Generate synthetic investors with a capital history."""

    STATUSES = list(InvestorStatus)
    STATUS_WEIGHTS = [0.10, 0.80, 0.05, 0.05]

    DESCRIPTIONS = {
        TransactionType.CAPITAL_DEPOSIT: "Capital deposit",
        TransactionType.CAPITAL_WITHDRAWAL: "Capital withdrawal",
        TransactionType.PROFIT_DEPOSIT: "Profit reinvested",
        TransactionType.PROFIT_WITHDRAWAL: "Profit withdrawal",
    }

    def generate(
        self,
        office_id: str,
        status: InvestorStatus | None = None,
        installment_deposit: Decimal | None = None,
        grace_deposit: Decimal | None = None,
    ) -> Investor:
        """Generate a single investor.

        Parameters
        ----------
        office_id : str
            Office the investor belongs to.
        status : InvestorStatus | None
            Investor status; weighted random when omitted.
        installment_deposit : Decimal | None
            Opening deposit into the installment pool; random when omitted.
        grace_deposit : Decimal | None
            Opening deposit into the grace pool; random when omitted.

        Returns
        -------
        Investor
            Generated investor with opening deposits and, for active
            investors, an occasional withdrawal. ``funded_loan_ids`` is
            empty until loans are added through a store.
        """
        if status is None:
            status = self.rng.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]
        if installment_deposit is None:
            installment_deposit = Decimal(self.rng.randint(50, 500) * 1000)
        if grace_deposit is None:
            grace_deposit = Decimal(self.rng.randint(0, 200) * 1000)

        joined = self._past_day(200, 800)
        investor = Investor(
            investor_id=self._new_id(),
            office_id=office_id,
            name=self.fake.name(),
            status=status,
            date=joined,
        )

        history = investor.transaction_history
        if installment_deposit > 0:
            history.append(
                self.generate_transaction(
                    TransactionType.CAPITAL_DEPOSIT, CapitalSource.INSTALLMENT, installment_deposit
                )
            )
        if grace_deposit > 0:
            history.append(
                self.generate_transaction(
                    TransactionType.CAPITAL_DEPOSIT, CapitalSource.GRACE, grace_deposit
                )
            )

        if status == InvestorStatus.ACTIVE and installment_deposit > 0 and self.rng.random() < 0.3:
            # small partial withdrawal from the installment pool
            fraction = Decimal(self.rng.randint(1, 10)) / Decimal(100)
            history.append(
                self.generate_transaction(
                    TransactionType.CAPITAL_WITHDRAWAL,
                    CapitalSource.INSTALLMENT,
                    (installment_deposit * fraction).quantize(Decimal("1")),
                )
            )

        if status == InvestorStatus.REJECTED:
            investor.rejection_reason = "Identity could not be verified"
        return investor

    def generate_batch(self, office_id: str, count: int) -> Iterator[Investor]:
        """Generate multiple investors.

        Parameters
        ----------
        office_id : str
            Office the investors belong to.
        count : int
            Number of investors to generate.

        Yields
        ------
        Investor
            Generated investors.
        """
        for _ in range(count):
            yield self.generate(office_id)

    def generate_transaction(
        self,
        tx_type: TransactionType,
        capital_source: CapitalSource,
        amount: Decimal,
    ) -> Transaction:
        """Generate a capital movement dated before the reference day."""
        withdrawal_method = None
        if tx_type in (TransactionType.CAPITAL_WITHDRAWAL, TransactionType.PROFIT_WITHDRAWAL):
            withdrawal_method = self.rng.choice(list(WithdrawalMethod))
        return Transaction(
            transaction_id=self._new_id(),
            date=self._past_day(1, 180),
            type=tx_type,
            amount=amount,
            capital_source=capital_source,
            description=self.DESCRIPTIONS[tx_type],
            withdrawal_method=withdrawal_method,
        )
