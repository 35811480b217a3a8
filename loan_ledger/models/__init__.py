"""Record models for loan-ledger."""

from loan_ledger.models.borrower import Borrower, FundingShare, Installment
from loan_ledger.models.enums import (
    BorrowerStatus,
    CapitalSource,
    Direction,
    InstallmentStatus,
    InvestorStatus,
    LoanType,
    PaymentStatus,
    Permission,
    Severity,
    StatusLabel,
    TransactionType,
    UserRole,
    UserStatus,
    WithdrawalMethod,
)
from loan_ledger.models.investor import Investor, Transaction
from loan_ledger.models.user import User

__all__ = [
    "Borrower",
    "BorrowerStatus",
    "CapitalSource",
    "Direction",
    "FundingShare",
    "Installment",
    "InstallmentStatus",
    "Investor",
    "InvestorStatus",
    "LoanType",
    "PaymentStatus",
    "Permission",
    "Severity",
    "StatusLabel",
    "Transaction",
    "TransactionType",
    "User",
    "UserRole",
    "UserStatus",
    "WithdrawalMethod",
]
