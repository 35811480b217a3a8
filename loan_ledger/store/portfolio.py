"""Office portfolio store with referential integrity."""

from dataclasses import dataclass, field

from loan_ledger.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from loan_ledger.models import Borrower, Investor, Transaction, User


@dataclass
class PortfolioStore:
    """In-memory store for users, investors and loans with relationship tracking."""

    # Primary records
    users: dict[str, User] = field(default_factory=dict)
    investors: dict[str, Investor] = field(default_factory=dict)
    borrowers: dict[str, Borrower] = field(default_factory=dict)

    # Relationship indexes
    _office_investors: dict[str, list[str]] = field(default_factory=dict)
    _office_borrowers: dict[str, list[str]] = field(default_factory=dict)

    def add_user(self, user: User) -> None:
        """Add a user to the store."""
        if user.managed_by and user.managed_by not in self.users:
            raise ReferentialIntegrityError(f"Manager {user.managed_by} not found")
        self.users[user.user_id] = user

    def add_investor(self, investor: Investor) -> None:
        """Add an investor to the store."""
        self.investors[investor.investor_id] = investor
        if investor.office_id:
            self._office_investors.setdefault(investor.office_id, []).append(investor.investor_id)

    def add_borrower(self, borrower: Borrower) -> None:
        """Add a loan to the store and link it to its funders.

        Raises
        ------
        ReferentialIntegrityError
            If a funding share names an investor not in the store.
        InvalidEntityStateError
            If the funding shares exceed the loan principal.
        """
        for share in borrower.funded_by:
            if share.investor_id not in self.investors:
                raise ReferentialIntegrityError(f"Investor {share.investor_id} not found")
            if share.amount <= 0:
                raise InvalidEntityStateError(
                    f"Funding share of {share.investor_id} on {borrower.borrower_id} must be positive"
                )
        if borrower.funded_total > borrower.amount:
            raise InvalidEntityStateError(
                f"Loan {borrower.borrower_id} is funded beyond its principal"
            )

        self.borrowers[borrower.borrower_id] = borrower
        if borrower.office_id:
            self._office_borrowers.setdefault(borrower.office_id, []).append(borrower.borrower_id)

        for share in borrower.funded_by:
            funded = self.investors[share.investor_id].funded_loan_ids
            if borrower.borrower_id not in funded:
                funded.append(borrower.borrower_id)

    def add_transaction(self, investor_id: str, transaction: Transaction) -> None:
        """Append a capital transaction to an investor's history."""
        if investor_id not in self.investors:
            raise ReferentialIntegrityError(f"Investor {investor_id} not found")
        if transaction.amount <= 0:
            raise InvalidEntityStateError(
                f"Transaction {transaction.transaction_id} must have a positive amount"
            )
        self.investors[investor_id].transaction_history.append(transaction)

    # Query methods
    def get_investor(self, investor_id: str) -> Investor:
        """Get an investor by id."""
        try:
            return self.investors[investor_id]
        except KeyError:
            raise EntityNotFoundError(f"Investor {investor_id} not found") from None

    def get_borrower(self, borrower_id: str) -> Borrower:
        """Get a loan by id."""
        try:
            return self.borrowers[borrower_id]
        except KeyError:
            raise EntityNotFoundError(f"Borrower {borrower_id} not found") from None

    def get_funded_borrowers(self, investor_id: str) -> list[Borrower]:
        """Get all loans an investor has funded."""
        investor = self.get_investor(investor_id)
        return [self.borrowers[bid] for bid in investor.funded_loan_ids if bid in self.borrowers]

    def get_office_borrowers(self, office_id: str) -> list[Borrower]:
        """Get all loans of an office."""
        borrower_ids = self._office_borrowers.get(office_id, [])
        return [self.borrowers[bid] for bid in borrower_ids]

    def get_office_investors(self, office_id: str) -> list[Investor]:
        """Get all investors of an office."""
        investor_ids = self._office_investors.get(office_id, [])
        return [self.investors[iid] for iid in investor_ids]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all records."""
        return {
            "users": len(self.users),
            "investors": len(self.investors),
            "borrowers": len(self.borrowers),
            "transactions": sum(len(inv.transaction_history) for inv in self.investors.values()),
            "offices": len(set(self._office_investors) | set(self._office_borrowers)),
        }
