"""Profit split between investors and the institution."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from loan_ledger.config import ProfitConfig
from loan_ledger.engine.financials import Participation, classify_participation
from loan_ledger.models.borrower import Borrower
from loan_ledger.models.enums import LoanType
from loan_ledger.models.investor import Investor

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ProfitSplit:
    """Profit on one funded share."""

    investor_profit: Decimal
    institution_profit: Decimal

    @property
    def total_profit(self) -> Decimal:
        return self.investor_profit + self.institution_profit


@dataclass(frozen=True)
class LoanProfit:
    """Profit generated by a single loan across its funders."""

    borrower_id: str
    name: str
    amount: Decimal
    institution_profit: Decimal
    investor_profit: Decimal

    @property
    def total_profit(self) -> Decimal:
        return self.institution_profit + self.investor_profit


@dataclass(frozen=True)
class InvestorProfit:
    """Profit accrued to one investor."""

    investor_id: str
    name: str
    profit: Decimal


@dataclass(frozen=True)
class ProfitSummary:
    """Profit totals for a set of loans of one type."""

    institution_profit: Decimal
    investors_profit: Decimal
    loan_profits: list[LoanProfit]
    investor_profits: list[InvestorProfit]

    @property
    def total_profit(self) -> Decimal:
        return self.institution_profit + self.investors_profit


def percent(value: float | Decimal) -> Decimal:
    """Convert a percentage to a Decimal fraction."""
    return Decimal(str(value)) / HUNDRED


def generates_profit(borrower: Borrower) -> bool:
    """Loans that are approved and not defaulted produce profit."""
    return classify_participation(borrower) in (Participation.ACTIVE, Participation.SETTLED)


def loan_profit_on_share(
    borrower: Borrower,
    share_amount: Decimal,
    investor: Investor,
    config: ProfitConfig,
) -> ProfitSplit | None:
    """Split the profit earned on one funded share.

    Returns ``None`` when the loan lacks the fields needed to price it.
    """
    if borrower.loan_type == LoanType.INSTALLMENT:
        if not borrower.rate or not borrower.term:
            return None
        total = share_amount * percent(borrower.rate) * Decimal(str(borrower.term))
        share = investor.installment_profit_share
        if share is None:
            share = config.investor_share_percentage
    elif borrower.loan_type == LoanType.GRACE_PERIOD:
        total = share_amount * percent(config.grace_total_profit_percentage)
        share = investor.grace_profit_share
        if share is None:
            share = config.grace_investor_share_percentage
    else:
        return None

    investor_portion = total * percent(share)
    return ProfitSplit(investor_profit=investor_portion, institution_profit=total - investor_portion)


def summarize_profit(
    borrowers: Iterable[Borrower],
    investors: Iterable[Investor],
    config: ProfitConfig,
) -> ProfitSummary:
    """Aggregate profit over the profit-generating loans in ``borrowers``.

    Funding shares whose investor is not in ``investors`` are skipped.
    """
    investor_map = {inv.investor_id: inv for inv in investors}
    institution_total = ZERO
    investors_total = ZERO
    loan_profits: list[LoanProfit] = []
    per_investor: dict[str, Decimal] = {}

    for loan in borrowers:
        if not generates_profit(loan) or not loan.funded_by:
            continue

        loan_institution = ZERO
        loan_investor = ZERO
        priced = False
        for funder in loan.funded_by:
            investor = investor_map.get(funder.investor_id)
            if investor is None:
                continue
            split = loan_profit_on_share(loan, funder.amount, investor, config)
            if split is None:
                continue
            priced = True
            loan_institution += split.institution_profit
            loan_investor += split.investor_profit
            per_investor[investor.investor_id] = (
                per_investor.get(investor.investor_id, ZERO) + split.investor_profit
            )

        if not priced:
            continue
        institution_total += loan_institution
        investors_total += loan_investor
        loan_profits.append(
            LoanProfit(
                borrower_id=loan.borrower_id,
                name=loan.name,
                amount=loan.amount,
                institution_profit=loan_institution,
                investor_profit=loan_investor,
            )
        )

    return ProfitSummary(
        institution_profit=institution_total,
        investors_profit=investors_total,
        loan_profits=loan_profits,
        investor_profits=[
            InvestorProfit(investor_id=inv_id, name=investor_map[inv_id].name, profit=profit)
            for inv_id, profit in per_investor.items()
        ],
    )


def expected_investor_profit(
    investor: Investor,
    borrowers: Iterable[Borrower],
    config: ProfitConfig,
) -> Decimal:
    """Profit an investor expects from all approved loans it funds."""
    funded_ids = set(investor.funded_loan_ids or [])
    total = ZERO
    for loan in borrowers:
        if loan.borrower_id not in funded_ids:
            continue
        if classify_participation(loan) == Participation.EXCLUDED:
            continue
        share = loan.funding_for(investor.investor_id)
        if share is None:
            continue
        split = loan_profit_on_share(loan, share.amount, investor, config)
        if split is not None:
            total += split.investor_profit
    return total
