"""Custom exception hierarchy for loan-ledger."""


class LoanLedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class CallerMisuseError(LoanLedgerError):
    """Raised when a collaborator calls the engine without a required argument."""


class MissingEvaluationDateError(CallerMisuseError):
    """Raised when a date-dependent computation is called without an evaluation date."""


class ConfigurationError(LoanLedgerError):
    """Raised when configuration is invalid or missing."""


class EntityNotFoundError(LoanLedgerError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(LoanLedgerError):
    """Raised when an entity is in an invalid state for the operation."""
