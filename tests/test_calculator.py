"""Tests for the loan and profit calculator."""

from decimal import Decimal

import pytest

from loan_ledger.calculator import (
    GraceQuote,
    InstallmentQuote,
    SalaryQuote,
    build_installment_schedule,
    grace_quote,
    installment_quote,
    salary_quote,
)
from loan_ledger.config import ProfitConfig
from loan_ledger.models import InstallmentStatus


class TestInstallmentQuote:
    """Tests for installment_quote."""

    def test_flat_interest(self) -> None:
        quote = installment_quote(Decimal("12000"), 15, 1, 70)

        assert quote.total_interest == Decimal("1800")
        assert quote.total_payment == Decimal("13800")
        assert quote.monthly_payment == Decimal("1150")
        assert quote.investor_profit == Decimal("1260")
        assert quote.institution_profit == Decimal("540")

    def test_accepts_strings(self) -> None:
        assert installment_quote("12000", "15", "1", "70").total_interest == Decimal("1800")

    @pytest.mark.parametrize(
        "args",
        [
            (0, 15, 1, 70),
            (-100, 15, 1, 70),
            (1000, 15, 0, 70),
            (1000, -1, 1, 70),
            ("abc", 15, 1, 70),
            (None, 15, 1, 70),
            (float("inf"), 15, 1, 70),
        ],
    )
    def test_invalid_input_gives_zero_quote(self, args: tuple) -> None:
        assert installment_quote(*args) == InstallmentQuote()


class TestGraceQuote:
    """Tests for grace_quote."""

    def test_without_discount(self, config: ProfitConfig) -> None:
        quote = grace_quote(Decimal("20000"), None, config)

        assert quote.total_profit == Decimal("5000")
        assert quote.investor_profit == Decimal("1665")
        assert quote.institution_profit == Decimal("3335")
        assert quote.net_profit == Decimal("5000")

    def test_discount_reduces_institution_share(self, config: ProfitConfig) -> None:
        quote = grace_quote(Decimal("20000"), Decimal("1000"), config)

        assert quote.net_profit == Decimal("4000")
        assert quote.investor_profit == Decimal("1665")
        assert quote.institution_profit == Decimal("2335")

    def test_net_profit_clamped(self, config: ProfitConfig) -> None:
        assert grace_quote(Decimal("1000"), Decimal("999999"), config).net_profit == Decimal("0")

    def test_invalid_principal(self, config: ProfitConfig) -> None:
        assert grace_quote("", None, config) == GraceQuote()


class TestSalaryQuote:
    """Tests for salary_quote."""

    def test_max_loan(self, config: ProfitConfig) -> None:
        quote = salary_quote(Decimal("10000"), config)

        assert quote.total_repayment == Decimal("6500")
        assert quote.max_grace_loan_amount == Decimal("5200")
        assert quote.profit == Decimal("1300")

    def test_zero_salary(self, config: ProfitConfig) -> None:
        assert salary_quote(0, config) == SalaryQuote()


class TestInstallmentSchedule:
    """Tests for build_installment_schedule."""

    def test_months_and_status(self) -> None:
        schedule = build_installment_schedule(Decimal("24000"), Decimal("15"), 2)

        assert [i.month for i in schedule] == list(range(1, 25))
        assert all(i.status == InstallmentStatus.UNPAID for i in schedule)
        assert schedule[0].principal_amount == Decimal("1000.00")
        assert schedule[0].interest_amount == Decimal("150.00")

    def test_sums_exactly(self) -> None:
        schedule = build_installment_schedule(Decimal("10000"), Decimal("15"), 1)

        assert sum(i.principal_amount for i in schedule) == Decimal("10000")
        assert sum(i.interest_amount for i in schedule) == Decimal("1500")
        assert sum(i.total_amount for i in schedule) == Decimal("11500")

    def test_zero_term(self) -> None:
        assert build_installment_schedule(Decimal("1000"), Decimal("15"), 0) == []
