"""In-memory store for maintaining record relationships."""

from loan_ledger.store.portfolio import PortfolioStore

__all__ = ["PortfolioStore"]
