"""Synthetic record generators."""

from loan_ledger.generators.base import BaseGenerator
from loan_ledger.generators.borrower import BorrowerGenerator
from loan_ledger.generators.investor import InvestorGenerator
from loan_ledger.generators.user import UserGenerator

__all__ = [
    "BaseGenerator",
    "BorrowerGenerator",
    "InvestorGenerator",
    "UserGenerator",
]
