"""Investor capital accounting and loan status engine."""

from loan_ledger.config import LedgerConfig, ProfitConfig
from loan_ledger.dates import is_valid_date, normalize_to_day
from loan_ledger.engine import (
    compute_aggregate,
    compute_financials,
    derive_remaining,
    derive_status,
    recompute_investor,
)

__version__ = "0.1.0"

__all__ = [
    "LedgerConfig",
    "ProfitConfig",
    "compute_aggregate",
    "compute_financials",
    "derive_remaining",
    "derive_status",
    "is_valid_date",
    "normalize_to_day",
    "recompute_investor",
]
