"""Investor and capital transaction models."""

from dataclasses import dataclass, field
from decimal import Decimal

from loan_ledger.dates import DateLike
from loan_ledger.models.enums import (
    CapitalSource,
    InvestorStatus,
    TransactionType,
    WithdrawalMethod,
)


@dataclass
class Transaction:
    """Deposit into or withdrawal from an investor's capital."""

    transaction_id: str
    date: DateLike
    type: TransactionType
    amount: Decimal
    capital_source: CapitalSource  # which capital pool the movement affects
    description: str = ""
    withdrawal_method: WithdrawalMethod | None = None


@dataclass
class Investor:
    """Investor entity.

    ``defaulted_funds`` and ``amount`` are cached values; ``amount`` is the
    idle (liquid) balance. Both are refreshed with
    :func:`loan_ledger.engine.financials.recompute_investor`.
    """

    investor_id: str
    office_id: str | None
    name: str
    status: InvestorStatus
    transaction_history: list[Transaction] = field(default_factory=list)
    funded_loan_ids: list[str] = field(default_factory=list)
    branch_id: str | None = None
    date: DateLike = None
    installment_profit_share: float | None = None  # overrides the office default
    grace_profit_share: float | None = None
    defaulted_funds: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")
    submitted_by: str | None = None
    rejection_reason: str | None = None
