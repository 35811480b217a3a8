"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.config import ProfitConfig
from loan_ledger.models import (
    Borrower,
    BorrowerStatus,
    CapitalSource,
    FundingShare,
    Installment,
    InstallmentStatus,
    Investor,
    InvestorStatus,
    LoanType,
    Transaction,
    TransactionType,
    User,
    UserRole,
)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def today() -> date:
    """Evaluation date used across tests."""
    return date(2024, 6, 15)


@pytest.fixture
def config() -> ProfitConfig:
    """Default profit configuration."""
    return ProfitConfig()


@pytest.fixture
def office_id() -> str:
    """Sample office ID."""
    return "office-test-001"


def _deposit(
    amount: str,
    source: CapitalSource = CapitalSource.INSTALLMENT,
    tx_type: TransactionType = TransactionType.CAPITAL_DEPOSIT,
    tx_id: str = "tx-001",
) -> Transaction:
    """Build a capital transaction."""
    return Transaction(
        transaction_id=tx_id,
        date=date(2024, 1, 1),
        type=tx_type,
        amount=Decimal(amount),
        capital_source=source,
    )


@pytest.fixture
def sample_investor(office_id: str) -> Investor:
    """Active investor with 100000 in the installment pool and 40000 in grace."""
    return Investor(
        investor_id="inv-test-001",
        office_id=office_id,
        name="Test Investor",
        status=InvestorStatus.ACTIVE,
        transaction_history=[
            _deposit("100000", CapitalSource.INSTALLMENT, tx_id="tx-001"),
            _deposit("40000", CapitalSource.GRACE, tx_id="tx-002"),
        ],
    )


@pytest.fixture
def installment_loan(office_id: str, sample_investor: Investor) -> Borrower:
    """Regular installment loan of 50000 funded by the sample investor."""
    sample_investor.funded_loan_ids.append("loan-inst-001")
    return Borrower(
        borrower_id="loan-inst-001",
        office_id=office_id,
        name="Installment Borrower",
        loan_type=LoanType.INSTALLMENT,
        amount=Decimal("50000"),
        status=BorrowerStatus.REGULAR,
        date=date(2024, 1, 1),
        rate=Decimal("15"),
        term=2,
        installments=[
            Installment(month=m, status=InstallmentStatus.PAID if m < 6 else InstallmentStatus.UNPAID)
            for m in range(1, 25)
        ],
        funded_by=[FundingShare(investor_id=sample_investor.investor_id, amount=Decimal("50000"))],
    )


@pytest.fixture
def grace_loan(office_id: str, sample_investor: Investor) -> Borrower:
    """Regular grace-period loan of 20000 due in the future, funded by the sample investor."""
    sample_investor.funded_loan_ids.append("loan-grace-001")
    return Borrower(
        borrower_id="loan-grace-001",
        office_id=office_id,
        name="Grace Borrower",
        loan_type=LoanType.GRACE_PERIOD,
        amount=Decimal("20000"),
        status=BorrowerStatus.REGULAR,
        date=date(2024, 3, 1),
        due_date=date(2024, 9, 1),
        funded_by=[FundingShare(investor_id=sample_investor.investor_id, amount=Decimal("20000"))],
    )


@pytest.fixture
def manager(office_id: str) -> User:
    """Active office manager."""
    return User(
        user_id="user-mgr-001",
        name="Office Manager",
        role=UserRole.OFFICE_MANAGER,
        office_id=office_id,
    )


@pytest.fixture
def admin() -> User:
    """System administrator."""
    return User(user_id="user-admin-001", name="Admin", role=UserRole.SYSTEM_ADMIN)
