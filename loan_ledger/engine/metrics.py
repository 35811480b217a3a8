"""Role-scoped dashboard metrics.

:func:`compute_aggregate` folds the status and ledger engines over a full
snapshot of records and returns a plain, side-effect free result shaped for
the caller's role.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence

from loan_ledger.config import ProfitConfig
from loan_ledger.dates import require_evaluation_day
from loan_ledger.engine.financials import (
    InvestorFinancials,
    classify_transaction,
    compute_financials,
    is_defaulted,
)
from loan_ledger.engine.profit import (
    InvestorProfit,
    LoanProfit,
    expected_investor_profit,
    percent,
    summarize_profit,
)
from loan_ledger.engine.status import derive_status
from loan_ledger.exceptions import CallerMisuseError
from loan_ledger.models.borrower import Borrower
from loan_ledger.models.enums import (
    BorrowerStatus,
    InvestorStatus,
    LoanType,
    StatusLabel,
    TransactionType,
    UserRole,
    UserStatus,
)
from loan_ledger.models.investor import Investor
from loan_ledger.models.user import User
from loan_ledger.permissions import has_full_visibility

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CapitalMetrics:
    """Summed investor capital."""

    total: Decimal = ZERO
    active: Decimal = ZERO
    defaulted: Decimal = ZERO
    idle_installment: Decimal = ZERO
    idle_grace: Decimal = ZERO

    @property
    def idle(self) -> Decimal:
        return self.idle_installment + self.idle_grace


@dataclass(frozen=True)
class LoanTypeMetrics:
    """Portfolio figures for one loan type."""

    loan_type: LoanType
    loans_count: int
    loans_granted: Decimal
    defaulted_loans_count: int
    defaulted_funds: Decimal
    default_rate: Decimal  # percent of granted principal
    defaulted_profits: Decimal
    late_loans_count: int
    due_debts: Decimal
    total_discounts: Decimal
    institution_profit: Decimal
    investors_profit: Decimal
    investor_profits: list[InvestorProfit]
    loan_profits: list[LoanProfit]

    @property
    def total_profit(self) -> Decimal:
        return self.institution_profit + self.investors_profit

    @property
    def net_profit(self) -> Decimal:
        """Institution's share of the generated profit."""
        return self.institution_profit


@dataclass(frozen=True)
class IdleInvestor:
    investor_id: str
    name: str
    idle_installment_capital: Decimal
    idle_grace_capital: Decimal

    @property
    def idle_capital(self) -> Decimal:
        return self.idle_installment_capital + self.idle_grace_capital


@dataclass(frozen=True)
class IdleFundsMetrics:
    idle_investors: list[IdleInvestor]
    total_idle_funds: Decimal


@dataclass(frozen=True)
class AdminMetrics:
    """System-wide figures for the platform administrator."""

    office_managers_count: int
    active_managers_count: int
    pending_managers_count: int
    total_users_count: int
    total_capital: Decimal
    idle_installment_capital: Decimal
    idle_grace_capital: Decimal
    total_active_loans: int


@dataclass(frozen=True)
class ManagerMetrics:
    """Office figures for managers, assistants and employees."""

    office_id: str | None
    borrowers_count: int
    investors_count: int
    pending_requests_count: int
    capital: CapitalMetrics
    installments: LoanTypeMetrics
    grace_period: LoanTypeMetrics
    idle_funds: IdleFundsMetrics

    @property
    def loans_granted(self) -> Decimal:
        return self.installments.loans_granted + self.grace_period.loans_granted

    @property
    def net_profit(self) -> Decimal:
        return self.installments.net_profit + self.grace_period.net_profit

    @property
    def defaulted_loans_count(self) -> int:
        return self.installments.defaulted_loans_count + self.grace_period.defaulted_loans_count


@dataclass(frozen=True)
class InvestorPosition:
    """The calling investor's own figures."""

    investor_id: str
    deposited_capital: Decimal
    active_capital: Decimal
    defaulted_funds: Decimal
    idle_capital: Decimal
    expected_profit: Decimal


@dataclass(frozen=True)
class InvestorMetrics:
    total_capital: Decimal
    total_defaulted: Decimal
    active_investors_count: int
    total_investors_count: int
    own: InvestorPosition | None


@dataclass(frozen=True)
class RoleScopedMetrics:
    """Dashboard snapshot; exactly one of the role sections is populated."""

    role: UserRole
    evaluation_date: date
    admin: AdminMetrics | None = None
    manager: ManagerMetrics | None = None
    investor: InvestorMetrics | None = None


def scope_records(
    current_user: User,
    borrowers: Sequence[Borrower],
    investors: Sequence[Investor],
) -> tuple[list[Borrower], list[Investor]]:
    """Restrict records to the caller's office unless it sees everything."""
    if has_full_visibility(current_user.role):
        return list(borrowers), list(investors)

    office_id = current_user.office_id
    if not office_id:
        logger.error(
            "User %s with role %s has no office; returning an empty scope",
            current_user.user_id,
            _value(current_user.role),
        )
        return [], []

    return (
        [b for b in borrowers if b.office_id == office_id],
        [i for i in investors if i.office_id == office_id],
    )


def sum_capital(financials: Sequence[InvestorFinancials]) -> CapitalMetrics:
    """Add up investor snapshots."""
    return CapitalMetrics(
        total=sum((f.total_capital_in_system for f in financials), ZERO),
        active=sum((f.active_capital for f in financials), ZERO),
        defaulted=sum((f.defaulted_funds for f in financials), ZERO),
        idle_installment=sum((f.idle_installment_capital for f in financials), ZERO),
        idle_grace=sum((f.idle_grace_capital for f in financials), ZERO),
    )


def compute_loan_type_metrics(
    loan_type: LoanType,
    borrowers: Sequence[Borrower],
    investors: Sequence[Investor],
    config: ProfitConfig,
    today: date,
) -> LoanTypeMetrics:
    """Portfolio, risk and profit figures for the loans of ``loan_type``."""
    loans = [b for b in borrowers if b.loan_type == loan_type]
    granted = sum((b.amount for b in loans), ZERO)

    defaulted = [b for b in loans if is_defaulted(b)]
    defaulted_funds = sum((b.amount for b in defaulted), ZERO)
    default_rate = (defaulted_funds / granted * HUNDRED) if granted > 0 else ZERO

    late = [
        b
        for b in loans
        if not is_defaulted(b) and derive_status(b, today).label == StatusLabel.LATE
    ]

    profit = summarize_profit(loans, investors, config)

    return LoanTypeMetrics(
        loan_type=loan_type,
        loans_count=len(loans),
        loans_granted=granted,
        defaulted_loans_count=len(defaulted),
        defaulted_funds=defaulted_funds,
        default_rate=default_rate,
        defaulted_profits=sum((_lost_profit(b, config) for b in defaulted), ZERO),
        late_loans_count=len(late),
        due_debts=sum((b.amount for b in late), ZERO),
        total_discounts=sum((b.discount or ZERO for b in loans), ZERO),
        institution_profit=profit.institution_profit,
        investors_profit=profit.investors_profit,
        investor_profits=profit.investor_profits,
        loan_profits=profit.loan_profits,
    )


def compute_idle_funds(
    investors: Sequence[Investor],
    financials: dict[str, InvestorFinancials],
) -> IdleFundsMetrics:
    """Active investors holding undeployed capital."""
    idle_investors = []
    for investor in investors:
        if investor.status != InvestorStatus.ACTIVE:
            continue
        snapshot = financials[investor.investor_id]
        if snapshot.idle_capital <= 0:
            continue
        idle_investors.append(
            IdleInvestor(
                investor_id=investor.investor_id,
                name=investor.name,
                idle_installment_capital=snapshot.idle_installment_capital,
                idle_grace_capital=snapshot.idle_grace_capital,
            )
        )
    return IdleFundsMetrics(
        idle_investors=idle_investors,
        total_idle_funds=sum((i.idle_capital for i in idle_investors), ZERO),
    )


def compute_admin_metrics(
    users: Sequence[User],
    investors: Sequence[Investor],
    borrowers: Sequence[Borrower],
    today: date,
) -> AdminMetrics:
    managers = [u for u in users if u.role == UserRole.OFFICE_MANAGER]
    pending = sum(1 for u in managers if u.status == UserStatus.PENDING)
    active = sum(1 for u in managers if u.status == UserStatus.ACTIVE)
    capital = sum_capital([compute_financials(i, borrowers) for i in investors])
    active_loans = sum(
        1
        for b in borrowers
        if derive_status(b, today).label in (StatusLabel.REGULAR, StatusLabel.LATE)
    )
    return AdminMetrics(
        office_managers_count=len(managers),
        active_managers_count=active,
        pending_managers_count=pending,
        total_users_count=len(users),
        total_capital=capital.total,
        idle_installment_capital=capital.idle_installment,
        idle_grace_capital=capital.idle_grace,
        total_active_loans=active_loans,
    )


def compute_manager_metrics(
    office_id: str | None,
    scoped_borrowers: Sequence[Borrower],
    scoped_investors: Sequence[Investor],
    all_borrowers: Sequence[Borrower],
    config: ProfitConfig,
    today: date,
) -> ManagerMetrics:
    financials = {i.investor_id: compute_financials(i, all_borrowers) for i in scoped_investors}
    pending_requests = sum(1 for b in scoped_borrowers if b.status == BorrowerStatus.PENDING) + sum(
        1 for i in scoped_investors if i.status == InvestorStatus.PENDING
    )
    return ManagerMetrics(
        office_id=office_id,
        borrowers_count=len(scoped_borrowers),
        investors_count=len(scoped_investors),
        pending_requests_count=pending_requests,
        capital=sum_capital(list(financials.values())),
        installments=compute_loan_type_metrics(
            LoanType.INSTALLMENT, scoped_borrowers, scoped_investors, config, today
        ),
        grace_period=compute_loan_type_metrics(
            LoanType.GRACE_PERIOD, scoped_borrowers, scoped_investors, config, today
        ),
        idle_funds=compute_idle_funds(scoped_investors, financials),
    )


def compute_investor_metrics(
    current_user: User,
    scoped_investors: Sequence[Investor],
    all_borrowers: Sequence[Borrower],
    config: ProfitConfig,
) -> InvestorMetrics:
    financials = {i.investor_id: compute_financials(i, all_borrowers) for i in scoped_investors}
    capital = sum_capital(list(financials.values()))

    own = None
    me = next((i for i in scoped_investors if i.investor_id == current_user.user_id), None)
    if me is not None:
        mine = financials[me.investor_id]
        own = InvestorPosition(
            investor_id=me.investor_id,
            deposited_capital=_deposited_capital(me),
            active_capital=mine.active_capital,
            defaulted_funds=mine.defaulted_funds,
            idle_capital=mine.idle_capital,
            expected_profit=expected_investor_profit(me, all_borrowers, config),
        )

    return InvestorMetrics(
        total_capital=capital.total,
        total_defaulted=capital.defaulted,
        active_investors_count=sum(1 for i in scoped_investors if i.status == InvestorStatus.ACTIVE),
        total_investors_count=len(scoped_investors),
        own=own,
    )


def compute_aggregate(
    current_user: User,
    borrowers: Sequence[Borrower],
    investors: Sequence[Investor],
    users: Sequence[User],
    config: ProfitConfig,
    evaluation_date: date | datetime,
) -> RoleScopedMetrics:
    """Build the dashboard snapshot for ``current_user``.

    Parameters
    ----------
    current_user : User
        Caller; its role picks the metrics and its office the scope.
    borrowers, investors, users : Sequence
        Full record snapshot. Never mutated.
    config : ProfitConfig
        Profit split percentages in force for the caller's office.
    evaluation_date : date | datetime
        The "current" moment used for every status derivation.

    Returns
    -------
    RoleScopedMetrics
        Snapshot with the section matching the caller's role filled in.

    Raises
    ------
    CallerMisuseError
        If ``current_user`` or ``config`` is missing.
    MissingEvaluationDateError
        If ``evaluation_date`` is missing.
    ConfigurationError
        If a configured percentage is out of range.
    """
    today = require_evaluation_day(evaluation_date)
    if current_user is None:
        raise CallerMisuseError("current_user is required")
    if config is None:
        raise CallerMisuseError("config is required")
    config.validate()

    role = UserRole(current_user.role)
    borrowers = list(borrowers)
    investors = list(investors)
    users = list(users)

    if role == UserRole.SYSTEM_ADMIN:
        metrics = RoleScopedMetrics(
            role=role,
            evaluation_date=today,
            admin=compute_admin_metrics(users, investors, borrowers, today),
        )
        logger.info(
            "Computed admin metrics: %d users, %d investors, %d borrowers",
            len(users),
            len(investors),
            len(borrowers),
            extra=_log_context(current_user, role, today),
        )
        return metrics

    scoped_borrowers, scoped_investors = scope_records(current_user, borrowers, investors)

    if role == UserRole.INVESTOR:
        metrics = RoleScopedMetrics(
            role=role,
            evaluation_date=today,
            investor=compute_investor_metrics(current_user, scoped_investors, borrowers, config),
        )
    else:
        metrics = RoleScopedMetrics(
            role=role,
            evaluation_date=today,
            manager=compute_manager_metrics(
                current_user.office_id, scoped_borrowers, scoped_investors, borrowers, config, today
            ),
        )

    logger.info(
        "Computed %s metrics for office %s: %d borrowers, %d investors in scope",
        role.value,
        current_user.office_id,
        len(scoped_borrowers),
        len(scoped_investors),
        extra=_log_context(current_user, role, today),
    )
    return metrics


def _log_context(current_user: User, role: UserRole, today: date) -> dict[str, str | None]:
    return {
        "office_id": current_user.office_id,
        "user_id": current_user.user_id,
        "role": role.value,
        "evaluation_date": today.isoformat(),
    }


def _lost_profit(borrower: Borrower, config: ProfitConfig) -> Decimal:
    if borrower.loan_type == LoanType.INSTALLMENT:
        if not borrower.rate or not borrower.term:
            return ZERO
        return borrower.amount * percent(borrower.rate) * Decimal(str(borrower.term))
    return borrower.amount * percent(config.grace_total_profit_percentage)


def _deposited_capital(investor: Investor) -> Decimal:
    total = ZERO
    for tx in investor.transaction_history or []:
        classified = classify_transaction(tx)
        if classified is None:
            continue
        if TransactionType(tx.type) == TransactionType.CAPITAL_DEPOSIT:
            total += classified[2]
    return total


def _value(member: object) -> str:
    return getattr(member, "value", str(member))
