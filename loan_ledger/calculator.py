"""Loan and profit calculator.

Flat-interest quotes for installment loans, lump-sum profit quotes for
grace-period loans and the salary-based grace loan ceiling. Invalid inputs
produce zero quotes rather than errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from loan_ledger.config import ProfitConfig
from loan_ledger.models.borrower import Installment
from loan_ledger.models.enums import InstallmentStatus

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class InstallmentQuote:
    monthly_payment: Decimal = ZERO
    total_interest: Decimal = ZERO
    total_payment: Decimal = ZERO
    institution_profit: Decimal = ZERO
    investor_profit: Decimal = ZERO


@dataclass(frozen=True)
class GraceQuote:
    total_profit: Decimal = ZERO
    investor_profit: Decimal = ZERO
    institution_profit: Decimal = ZERO
    net_profit: Decimal = ZERO  # total profit after the discount


@dataclass(frozen=True)
class SalaryQuote:
    max_grace_loan_amount: Decimal = ZERO
    total_repayment: Decimal = ZERO
    profit: Decimal = ZERO


def installment_quote(
    principal: Decimal | float | str,
    annual_rate: Decimal | float | str,
    term_years: Decimal | float | str,
    investor_share_percentage: Decimal | float | str,
) -> InstallmentQuote:
    """Quote a flat-interest installment loan.

    Parameters
    ----------
    principal : Decimal | float | str
        Loan amount.
    annual_rate : Decimal | float | str
        Annual profit rate in percent.
    term_years : Decimal | float | str
        Term in years.
    investor_share_percentage : Decimal | float | str
        Investor share of the interest in percent.

    Returns
    -------
    InstallmentQuote
        All-zero quote when any input is unusable.
    """
    amount = _number(principal)
    rate = _number(annual_rate)
    years = _number(term_years)
    share = _number(investor_share_percentage)
    if amount is None or rate is None or years is None or share is None:
        return InstallmentQuote()
    if amount <= 0 or years <= 0 or rate < 0:
        return InstallmentQuote()

    total_interest = amount * (rate / HUNDRED) * years
    total_payment = amount + total_interest
    investor_profit = total_interest * share / HUNDRED

    return InstallmentQuote(
        monthly_payment=total_payment / (years * 12),
        total_interest=total_interest,
        total_payment=total_payment,
        institution_profit=total_interest - investor_profit,
        investor_profit=investor_profit,
    )


def grace_quote(
    principal: Decimal | float | str,
    discount: Decimal | float | str | None,
    config: ProfitConfig,
) -> GraceQuote:
    """Quote the profit on a grace-period loan.

    The investor share is taken from the gross profit; the discount only
    reduces the institution's part.
    """
    amount = _number(principal)
    if amount is None or amount <= 0:
        return GraceQuote()
    reduction = _number(discount) or ZERO

    total_profit = amount * _fraction(config.grace_total_profit_percentage)
    net_profit = max(ZERO, total_profit - reduction)
    investor_profit = total_profit * _fraction(config.grace_investor_share_percentage)

    return GraceQuote(
        total_profit=total_profit,
        investor_profit=investor_profit,
        institution_profit=net_profit - investor_profit,
        net_profit=net_profit,
    )


def salary_quote(monthly_salary: Decimal | float | str, config: ProfitConfig) -> SalaryQuote:
    """Largest grace loan a salary can repay in one payment."""
    salary = _number(monthly_salary)
    if salary is None or salary <= 0:
        return SalaryQuote()

    max_repayment = salary * _fraction(config.salary_repayment_percentage)
    max_loan = max_repayment / (1 + _fraction(config.grace_total_profit_percentage))

    return SalaryQuote(
        max_grace_loan_amount=max_loan,
        total_repayment=max_repayment,
        profit=max_repayment - max_loan,
    )


def build_installment_schedule(
    principal: Decimal,
    annual_rate: Decimal,
    term_years: int,
) -> list[Installment]:
    """Monthly installments for a flat-interest loan, all unpaid.

    Amounts are rounded to cents; the last installment absorbs the rounding
    difference so the schedule sums exactly to principal plus interest.
    """
    months = term_years * 12
    if months <= 0:
        return []

    total_interest = principal * (annual_rate / HUNDRED) * term_years
    principal_part = (principal / months).quantize(CENT, rounding=ROUND_HALF_UP)
    interest_part = (total_interest / months).quantize(CENT, rounding=ROUND_HALF_UP)

    schedule = []
    for month in range(1, months + 1):
        if month == months:
            principal_amount = principal - principal_part * (months - 1)
            interest_amount = total_interest - interest_part * (months - 1)
        else:
            principal_amount = principal_part
            interest_amount = interest_part
        schedule.append(
            Installment(
                month=month,
                status=InstallmentStatus.UNPAID,
                principal_amount=principal_amount,
                interest_amount=interest_amount,
                total_amount=principal_amount + interest_amount,
            )
        )
    return schedule


def _fraction(percentage: float) -> Decimal:
    return Decimal(str(percentage)) / HUNDRED


def _number(value: object) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None
