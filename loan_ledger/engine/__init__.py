"""Status, ledger and dashboard engines."""

from loan_ledger.engine.financials import (
    CapitalBucket,
    InvestorFinancials,
    Participation,
    classify_participation,
    compute_financials,
    recompute_investor,
)
from loan_ledger.engine.metrics import RoleScopedMetrics, compute_aggregate
from loan_ledger.engine.status import (
    RemainingDetails,
    StatusDetails,
    derive_remaining,
    derive_status,
    next_due_date,
    next_unpaid_installment,
)

__all__ = [
    "CapitalBucket",
    "InvestorFinancials",
    "Participation",
    "RemainingDetails",
    "RoleScopedMetrics",
    "StatusDetails",
    "classify_participation",
    "compute_aggregate",
    "compute_financials",
    "derive_remaining",
    "derive_status",
    "next_due_date",
    "next_unpaid_installment",
    "recompute_investor",
]
