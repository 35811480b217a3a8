"""Enumeration types for loan-ledger records."""

from enum import Enum


class LoanType(str, Enum):
    INSTALLMENT = "INSTALLMENT"
    GRACE_PERIOD = "GRACE_PERIOD"


class BorrowerStatus(str, Enum):
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    REGULAR = "REGULAR"
    LATE = "LATE"
    FULLY_PAID = "FULLY_PAID"
    DEFAULTED = "DEFAULTED"


class PaymentStatus(str, Enum):
    REGULAR = "REGULAR"
    LATE_ONE_INSTALLMENT = "LATE_ONE_INSTALLMENT"
    LATE_TWO_INSTALLMENTS = "LATE_TWO_INSTALLMENTS"
    DEFAULTED = "DEFAULTED"
    LEGAL_ACTION = "LEGAL_ACTION"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    GRACE_EXTENDED = "GRACE_EXTENDED"
    PAID = "PAID"


class InstallmentStatus(str, Enum):
    UNPAID = "UNPAID"
    LATE = "LATE"
    PAID = "PAID"


class Direction(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


class TransactionType(str, Enum):
    CAPITAL_DEPOSIT = "CAPITAL_DEPOSIT"
    CAPITAL_WITHDRAWAL = "CAPITAL_WITHDRAWAL"
    PROFIT_DEPOSIT = "PROFIT_DEPOSIT"
    PROFIT_WITHDRAWAL = "PROFIT_WITHDRAWAL"

    @property
    def direction(self) -> Direction:
        """Whether the transaction adds capital or removes it."""
        if self in (TransactionType.CAPITAL_DEPOSIT, TransactionType.PROFIT_DEPOSIT):
            return Direction.DEPOSIT
        return Direction.WITHDRAWAL


class CapitalSource(str, Enum):
    INSTALLMENT = "INSTALLMENT"
    GRACE = "GRACE"


class WithdrawalMethod(str, Enum):
    CASH = "CASH"
    BANK = "BANK"


class InvestorStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    REJECTED = "REJECTED"


class UserRole(str, Enum):
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    OFFICE_MANAGER = "OFFICE_MANAGER"
    ASSISTANT_MANAGER = "ASSISTANT_MANAGER"
    EMPLOYEE = "EMPLOYEE"
    INVESTOR = "INVESTOR"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    DELETED = "DELETED"


class Permission(str, Enum):
    MANAGE_INVESTORS = "MANAGE_INVESTORS"
    MANAGE_BORROWERS = "MANAGE_BORROWERS"
    IMPORT_DATA = "IMPORT_DATA"
    VIEW_REPORTS = "VIEW_REPORTS"
    MANAGE_REQUESTS = "MANAGE_REQUESTS"
    USE_CALCULATOR = "USE_CALCULATOR"
    ACCESS_SETTINGS = "ACCESS_SETTINGS"
    MANAGE_EMPLOYEE_PERMISSIONS = "MANAGE_EMPLOYEE_PERMISSIONS"
    VIEW_IDLE_FUNDS_REPORT = "VIEW_IDLE_FUNDS_REPORT"
    ALLOW_EMPLOYEE_LOAN_EDITS = "ALLOW_EMPLOYEE_LOAN_EDITS"


class StatusLabel(str, Enum):
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    FULLY_PAID = "FULLY_PAID"
    REGULAR = "REGULAR"
    LATE = "LATE"
    INVALID_DATA = "INVALID_DATA"
    INCOMPLETE_DATA = "INCOMPLETE_DATA"


class Severity(str, Enum):
    INFO = "INFO"
    NEGATIVE = "NEGATIVE"
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
