"""Tests for custom exception hierarchy."""

from loan_ledger.exceptions import (
    CallerMisuseError,
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    LoanLedgerError,
    MissingEvaluationDateError,
    ReferentialIntegrityError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_loan_ledger_error_is_exception(self) -> None:
        assert isinstance(LoanLedgerError("test"), Exception)

    def test_caller_misuse_is_loan_ledger_error(self) -> None:
        assert isinstance(CallerMisuseError("test"), LoanLedgerError)

    def test_missing_evaluation_date_is_caller_misuse(self) -> None:
        err = MissingEvaluationDateError("test")
        assert isinstance(err, CallerMisuseError)
        assert isinstance(err, LoanLedgerError)

    def test_entity_not_found_is_loan_ledger_error(self) -> None:
        assert isinstance(EntityNotFoundError("test"), LoanLedgerError)

    def test_referential_integrity_is_entity_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, LoanLedgerError)

    def test_invalid_entity_state_is_loan_ledger_error(self) -> None:
        assert isinstance(InvalidEntityStateError("test"), LoanLedgerError)

    def test_configuration_error_is_loan_ledger_error(self) -> None:
        assert isinstance(ConfigurationError("test"), LoanLedgerError)

    def test_exception_message(self) -> None:
        err = ReferentialIntegrityError("Investor inv-001 not found")
        assert str(err) == "Investor inv-001 not found"
