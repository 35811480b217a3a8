"""Office portfolio scenario for building consistent synthetic offices."""

from __future__ import annotations

import logging
import random
from datetime import date
from decimal import Decimal
from typing import Any

from loan_ledger.config import ProfitConfig
from loan_ledger.engine.financials import compute_financials, recompute_investor
from loan_ledger.engine.status import derive_status
from loan_ledger.generators import BorrowerGenerator, InvestorGenerator, UserGenerator
from loan_ledger.models import Borrower, FundingShare
from loan_ledger.models.enums import (
    BorrowerStatus,
    CapitalSource,
    InvestorStatus,
    LoanType,
    UserRole,
)
from loan_ledger.serialization import serialize_value
from loan_ledger.store import PortfolioStore

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class OfficePortfolioScenario:
    """Generate one or more offices with investors funding their loans.

    This scenario creates:
    - A system administrator and, per office, a manager, an assistant and
      employees
    - Investors with deposits in the installment and grace pools, each with
      a matching INVESTOR user sharing the investor id
    - Installment and grace-period loans funded from the investors' idle
      capital in the matching pool, never beyond the principal
    """

    def __init__(
        self,
        num_offices: int = 1,
        investors_per_office: int = 5,
        loans_per_office: int = 20,
        installment_loan_rate: float = 0.6,
        seed: int | None = None,
        as_of: date | None = None,
        config: ProfitConfig | None = None,
    ) -> None:
        """Initialize the office portfolio scenario.

        Parameters
        ----------
        num_offices : int
            Number of offices to generate.
        investors_per_office : int
            Investors per office.
        loans_per_office : int
            Loans per office.
        installment_loan_rate : float
            Share of loans that are installment loans (0.0 to 1.0).
        seed : int | None
            Random seed for reproducibility.
        as_of : date | None
            Reference day for generated dates (default: today).
        config : ProfitConfig | None
            Profit configuration used for loan rates.
        """
        self.num_offices = num_offices
        self.investors_per_office = investors_per_office
        self.loans_per_office = loans_per_office
        self.installment_loan_rate = installment_loan_rate
        self.seed = seed
        self.as_of = as_of or date.today()
        self.config = config or ProfitConfig()

        self._rng = random.Random(seed)
        self.store = PortfolioStore()
        # one Faker stream per generator; a shared seed would repeat ids
        self._user_gen = UserGenerator(seed=_offset(seed, 1), as_of=self.as_of)
        self._investor_gen = InvestorGenerator(seed=_offset(seed, 2), as_of=self.as_of)
        self._borrower_gen = BorrowerGenerator(
            seed=_offset(seed, 3), as_of=self.as_of, config=self.config
        )

    @property
    def office_ids(self) -> list[str]:
        return [f"office-{n}" for n in range(1, self.num_offices + 1)]

    def generate(self) -> PortfolioStore:
        """Generate all records for the scenario.

        Returns
        -------
        PortfolioStore
            Store containing all generated records, with every investor's
            cached balances refreshed.
        """
        logger.info(
            "Starting office portfolio scenario: %d offices, %d investors and %d loans each",
            self.num_offices,
            self.investors_per_office,
            self.loans_per_office,
        )

        self.store.add_user(self._user_gen.generate(UserRole.SYSTEM_ADMIN))

        for office_id in self.office_ids:
            for user in self._user_gen.generate_office_staff(office_id):
                self.store.add_user(user)
            self._generate_office(office_id)

        self._refresh_investors()

        logger.info(
            "Generated %d users, %d investors and %d loans",
            len(self.store.users),
            len(self.store.investors),
            len(self.store.borrowers),
        )
        return self.store

    def _generate_office(self, office_id: str) -> None:
        """Generate the investors and loans of one office."""
        investors = []
        for investor in self._investor_gen.generate_batch(office_id, self.investors_per_office):
            self.store.add_investor(investor)
            self.store.add_user(
                self._user_gen.generate(UserRole.INVESTOR, office_id, user_id=investor.investor_id)
            )
            investors.append(investor)

        available = {
            inv.investor_id: {
                source: compute_financials(inv, []).bucket(source).idle for source in CapitalSource
            }
            for inv in investors
            if inv.status == InvestorStatus.ACTIVE
        }

        for _ in range(self.loans_per_office):
            loan_type = (
                LoanType.INSTALLMENT
                if self._rng.random() < self.installment_loan_rate
                else LoanType.GRACE_PERIOD
            )
            borrower = self._borrower_gen.generate(office_id, loan_type=loan_type)
            borrower.funded_by = self._fund(borrower, available)
            self.store.add_borrower(borrower)

        logger.debug("Generated office %s", office_id)

    def _fund(
        self,
        borrower: Borrower,
        available: dict[str, dict[CapitalSource, Decimal]],
    ) -> list[FundingShare]:
        """Split a loan across up to two investors with idle capital in its pool."""
        if borrower.status in (BorrowerStatus.PENDING, BorrowerStatus.REJECTED):
            return []

        source = (
            CapitalSource.INSTALLMENT
            if borrower.loan_type == LoanType.INSTALLMENT
            else CapitalSource.GRACE
        )
        candidates = [inv_id for inv_id, pools in available.items() if pools[source] > 0]
        self._rng.shuffle(candidates)

        shares = []
        remaining = borrower.amount
        for inv_id in candidates[:2]:
            amount = min(remaining, available[inv_id][source])
            if amount <= 0:
                break
            available[inv_id][source] -= amount
            remaining -= amount
            shares.append(FundingShare(investor_id=inv_id, amount=amount))
        return shares

    def _refresh_investors(self) -> None:
        """Recompute cached investor balances against all generated loans."""
        borrowers = list(self.store.borrowers.values())
        for investor_id, investor in list(self.store.investors.items()):
            self.store.investors[investor_id] = recompute_investor(investor, borrowers)

    def get_portfolio_summary(self) -> dict[str, Any]:
        """Get summary statistics for the generated portfolio.

        Returns
        -------
        dict[str, Any]
            Portfolio summary statistics, with derived statuses evaluated on
            the scenario's reference day.
        """
        loans = list(self.store.borrowers.values())
        if not loans:
            return {}

        status_counts: dict[str, int] = {}
        for loan in loans:
            label = serialize_value(derive_status(loan, self.as_of).label)
            status_counts[label] = status_counts.get(label, 0) + 1

        return {
            "total_loans": len(loans),
            "total_principal": float(sum((l.amount for l in loans), ZERO)),
            "total_funded": float(sum((l.funded_total for l in loans), ZERO)),
            "installment_loans": sum(1 for l in loans if l.loan_type == LoanType.INSTALLMENT),
            "grace_loans": sum(1 for l in loans if l.loan_type == LoanType.GRACE_PERIOD),
            "status_distribution": status_counts,
            "idle_capital": float(
                sum((inv.amount for inv in self.store.investors.values()), ZERO)
            ),
        }


def _offset(seed: int | None, n: int) -> int | None:
    return None if seed is None else seed + n
