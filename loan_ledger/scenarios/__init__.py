"""Scenarios for building realistic office portfolios."""

from loan_ledger.scenarios.office_portfolio import OfficePortfolioScenario

__all__ = ["OfficePortfolioScenario"]
