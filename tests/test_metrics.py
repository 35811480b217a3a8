"""Tests for role-scoped dashboard metrics."""

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from loan_ledger.config import ProfitConfig
from loan_ledger.engine.financials import compute_financials
from loan_ledger.engine.metrics import (
    compute_aggregate,
    compute_idle_funds,
    scope_records,
    sum_capital,
)
from loan_ledger.exceptions import CallerMisuseError, ConfigurationError, MissingEvaluationDateError
from loan_ledger.models import (
    Borrower,
    BorrowerStatus,
    CapitalSource,
    Installment,
    InstallmentStatus,
    Investor,
    InvestorStatus,
    LoanType,
    Transaction,
    TransactionType,
    User,
    UserRole,
    UserStatus,
)


@pytest.fixture
def late_grace_loan(office_id: str) -> Borrower:
    """Unfunded grace loan of 10000 that fell due two weeks before the evaluation date."""
    return Borrower(
        borrower_id="loan-late-001",
        office_id=office_id,
        name="Late Borrower",
        loan_type=LoanType.GRACE_PERIOD,
        amount=Decimal("10000"),
        status=BorrowerStatus.REGULAR,
        date=date(2024, 1, 1),
        due_date=date(2024, 6, 1),
        discount=Decimal("500"),
    )


@pytest.fixture
def pending_loan(office_id: str) -> Borrower:
    return Borrower(
        borrower_id="loan-pending-001",
        office_id=office_id,
        name="Pending Borrower",
        loan_type=LoanType.INSTALLMENT,
        amount=Decimal("8000"),
        status=BorrowerStatus.PENDING,
        date=date(2024, 6, 10),
    )


@pytest.fixture
def foreign_investor() -> Investor:
    """Investor of another office with idle capital."""
    return Investor(
        investor_id="inv-other-001",
        office_id="office-other",
        name="Other Office Investor",
        status=InvestorStatus.ACTIVE,
        transaction_history=[
            Transaction(
                transaction_id="tx-other",
                date=date(2024, 1, 1),
                type=TransactionType.CAPITAL_DEPOSIT,
                amount=Decimal("60000"),
                capital_source=CapitalSource.INSTALLMENT,
            )
        ],
    )


@pytest.fixture
def snapshot(
    installment_loan: Borrower,
    grace_loan: Borrower,
    late_grace_loan: Borrower,
    pending_loan: Borrower,
    sample_investor: Investor,
    foreign_investor: Investor,
    manager: User,
    admin: User,
) -> dict:
    """Two-office record snapshot."""
    return {
        "borrowers": [installment_loan, grace_loan, late_grace_loan, pending_loan],
        "investors": [sample_investor, foreign_investor],
        "users": [
            admin,
            manager,
            User(user_id="user-mgr-002", name="Pending Manager", role=UserRole.OFFICE_MANAGER,
                 status=UserStatus.PENDING, office_id="office-other"),
        ],
    }


class TestManagerMetrics:
    """Office staff see their office only."""

    def test_capital(self, snapshot: dict, manager: User, config: ProfitConfig, today: date) -> None:
        result = compute_aggregate(manager, config=config, evaluation_date=today, **snapshot)

        assert result.role == UserRole.OFFICE_MANAGER
        assert result.admin is None and result.investor is None
        capital = result.manager.capital
        assert capital.total == Decimal("140000")
        assert capital.active == Decimal("70000")
        assert capital.defaulted == Decimal("0")
        assert capital.idle_installment == Decimal("50000")
        assert capital.idle_grace == Decimal("20000")

    def test_counts(self, snapshot: dict, manager: User, config: ProfitConfig, today: date) -> None:
        metrics = compute_aggregate(manager, config=config, evaluation_date=today, **snapshot).manager

        assert metrics.office_id == "office-test-001"
        assert metrics.borrowers_count == 4
        assert metrics.investors_count == 1
        assert metrics.pending_requests_count == 1

    def test_loan_type_metrics(self, snapshot: dict, manager: User, config: ProfitConfig, today: date) -> None:
        metrics = compute_aggregate(manager, config=config, evaluation_date=today, **snapshot).manager

        grace = metrics.grace_period
        assert grace.loans_count == 2
        assert grace.loans_granted == Decimal("30000")
        assert grace.late_loans_count == 1
        assert grace.due_debts == Decimal("10000")
        assert grace.total_discounts == Decimal("500")
        assert grace.net_profit == Decimal("3335")

        installments = metrics.installments
        assert installments.loans_count == 2
        assert installments.late_loans_count == 0
        assert installments.institution_profit == Decimal("4500")
        assert installments.investors_profit == Decimal("10500")
        assert metrics.net_profit == Decimal("7835")
        assert metrics.loans_granted == Decimal("88000")

    def test_defaulted_loans(
        self, snapshot: dict, manager: User, installment_loan: Borrower, config: ProfitConfig, today: date
    ) -> None:
        installment_loan.status = BorrowerStatus.DEFAULTED
        metrics = compute_aggregate(manager, config=config, evaluation_date=today, **snapshot).manager

        assert metrics.defaulted_loans_count == 1
        assert metrics.installments.defaulted_funds == Decimal("50000")
        assert metrics.installments.default_rate == Decimal("50000") / Decimal("58000") * 100
        assert metrics.installments.defaulted_profits == Decimal("15000")
        assert metrics.capital.defaulted == Decimal("50000")

    def test_idle_funds(self, snapshot: dict, manager: User, config: ProfitConfig, today: date) -> None:
        idle = compute_aggregate(manager, config=config, evaluation_date=today, **snapshot).manager.idle_funds
        assert [i.investor_id for i in idle.idle_investors] == ["inv-test-001"]
        assert idle.total_idle_funds == Decimal("70000")

    def test_employee_gets_manager_metrics(self, snapshot: dict, config: ProfitConfig, today: date) -> None:
        employee = User(user_id="emp-1", name="Employee", role=UserRole.EMPLOYEE, office_id="office-other")
        metrics = compute_aggregate(employee, config=config, evaluation_date=today, **snapshot).manager
        assert metrics.investors_count == 1
        assert metrics.borrowers_count == 0
        assert metrics.capital.total == Decimal("60000")

    def test_no_office_gets_empty_scope(
        self, snapshot: dict, config: ProfitConfig, today: date, caplog: pytest.LogCaptureFixture
    ) -> None:
        orphan = User(user_id="asst-1", name="Assistant", role=UserRole.ASSISTANT_MANAGER)
        with caplog.at_level(logging.ERROR, logger="loan_ledger"):
            metrics = compute_aggregate(orphan, config=config, evaluation_date=today, **snapshot).manager

        assert metrics.borrowers_count == 0
        assert metrics.capital.total == Decimal("0")
        assert "has no office" in caplog.text


class TestAdminMetrics:
    """System administrators see every office."""

    def test_admin(self, snapshot: dict, admin: User, config: ProfitConfig, today: date) -> None:
        result = compute_aggregate(admin, config=config, evaluation_date=today, **snapshot)

        assert result.manager is None
        metrics = result.admin
        assert metrics.office_managers_count == 2
        assert metrics.active_managers_count == 1
        assert metrics.pending_managers_count == 1
        assert metrics.total_users_count == 3
        assert metrics.total_capital == Decimal("200000")
        assert metrics.idle_installment_capital == Decimal("110000")
        assert metrics.idle_grace_capital == Decimal("20000")
        assert metrics.total_active_loans == 3

    def test_corrupt_schedule_does_not_abort_dashboard(
        self, snapshot: dict, admin: User, config: ProfitConfig, today: date
    ) -> None:
        corrupt = Borrower(
            borrower_id="loan-corrupt-001",
            office_id="office-other",
            name="Corrupt Borrower",
            loan_type=LoanType.INSTALLMENT,
            amount=Decimal("5000"),
            status=BorrowerStatus.REGULAR,
            date=date(9999, 12, 1),
            rate=Decimal("15"),
            term=1,
            installments=[Installment(month=100000, status=InstallmentStatus.UNPAID)],
        )
        snapshot["borrowers"].append(corrupt)

        metrics = compute_aggregate(admin, config=config, evaluation_date=today, **snapshot).admin
        assert metrics.total_active_loans == 3
        assert metrics.total_capital == Decimal("200000")

    def test_summary_log_carries_context(
        self,
        snapshot: dict,
        manager: User,
        config: ProfitConfig,
        today: date,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="loan_ledger"):
            compute_aggregate(manager, config=config, evaluation_date=today, **snapshot)

        record = next(r for r in caplog.records if r.getMessage().startswith("Computed"))
        assert record.office_id == "office-test-001"
        assert record.user_id == "user-mgr-001"
        assert record.role == "OFFICE_MANAGER"
        assert record.evaluation_date == "2024-06-15"

    def test_admin_office_is_ignored(self, snapshot: dict, config: ProfitConfig, today: date) -> None:
        admin = User(user_id="a", name="A", role=UserRole.SYSTEM_ADMIN, office_id="office-other")
        metrics = compute_aggregate(admin, config=config, evaluation_date=today, **snapshot).admin
        assert metrics.total_capital == Decimal("200000")


class TestInvestorMetrics:
    """Investors see office totals and their own position."""

    def test_own_position(self, snapshot: dict, config: ProfitConfig, today: date) -> None:
        caller = User(
            user_id="inv-test-001", name="Test Investor", role=UserRole.INVESTOR, office_id="office-test-001"
        )
        metrics = compute_aggregate(caller, config=config, evaluation_date=today, **snapshot).investor

        assert metrics.total_investors_count == 1
        assert metrics.active_investors_count == 1
        assert metrics.total_capital == Decimal("140000")
        own = metrics.own
        assert own.deposited_capital == Decimal("140000")
        assert own.active_capital == Decimal("70000")
        assert own.idle_capital == Decimal("70000")
        assert own.defaulted_funds == Decimal("0")
        assert own.expected_profit == Decimal("12165")

    def test_without_own_record(self, snapshot: dict, config: ProfitConfig, today: date) -> None:
        caller = User(user_id="nobody", name="N", role=UserRole.INVESTOR, office_id="office-test-001")
        metrics = compute_aggregate(caller, config=config, evaluation_date=today, **snapshot).investor
        assert metrics.own is None


class TestAggregateContract:
    """Input validation and purity."""

    def test_missing_evaluation_date(self, snapshot: dict, manager: User, config: ProfitConfig) -> None:
        with pytest.raises(MissingEvaluationDateError):
            compute_aggregate(manager, config=config, evaluation_date=None, **snapshot)

    def test_missing_user(self, snapshot: dict, config: ProfitConfig, today: date) -> None:
        with pytest.raises(CallerMisuseError):
            compute_aggregate(None, config=config, evaluation_date=today, **snapshot)

    def test_missing_config(self, snapshot: dict, manager: User, today: date) -> None:
        with pytest.raises(CallerMisuseError):
            compute_aggregate(manager, config=None, evaluation_date=today, **snapshot)

    def test_invalid_config(self, snapshot: dict, manager: User, today: date) -> None:
        with pytest.raises(ConfigurationError):
            compute_aggregate(
                manager, config=ProfitConfig(investor_share_percentage=120), evaluation_date=today, **snapshot
            )

    def test_datetime_evaluation(self, snapshot: dict, manager: User, config: ProfitConfig) -> None:
        result = compute_aggregate(
            manager, config=config, evaluation_date=datetime(2024, 6, 15, 22, 0), **snapshot
        )
        assert result.evaluation_date == date(2024, 6, 15)

    def test_does_not_mutate_records(
        self, snapshot: dict, manager: User, sample_investor: Investor, config: ProfitConfig, today: date
    ) -> None:
        compute_aggregate(manager, config=config, evaluation_date=today, **snapshot)
        assert sample_investor.amount == Decimal("0")
        assert len(sample_investor.transaction_history) == 2

    def test_repeatable(self, snapshot: dict, admin: User, config: ProfitConfig, today: date) -> None:
        first = compute_aggregate(admin, config=config, evaluation_date=today, **snapshot)
        second = compute_aggregate(admin, config=config, evaluation_date=today, **snapshot)
        assert first == second


class TestHelpers:
    """Tests for the scope and summation helpers."""

    def test_scope_records(
        self, snapshot: dict, manager: User, foreign_investor: Investor
    ) -> None:
        borrowers, investors = scope_records(manager, snapshot["borrowers"], snapshot["investors"])
        assert len(borrowers) == 4
        assert foreign_investor not in investors

    def test_sum_capital_empty(self) -> None:
        assert sum_capital([]).idle == Decimal("0")

    def test_idle_funds_skips_inactive(self, sample_investor: Investor) -> None:
        sample_investor.status = InvestorStatus.INACTIVE
        financials = {sample_investor.investor_id: compute_financials(sample_investor, [])}
        assert compute_idle_funds([sample_investor], financials).idle_investors == []
