"""Configuration management for loan-ledger."""

import os
from dataclasses import dataclass, field, fields

from loan_ledger.exceptions import ConfigurationError


@dataclass
class ProfitConfig:
    """Profit split percentages.

    Office managers can override every value, so the engine always receives
    an instance explicitly instead of reading module constants.
    """

    base_interest_rate: float = 15.0
    investor_share_percentage: float = 70.0
    grace_total_profit_percentage: float = 25.0
    grace_investor_share_percentage: float = 33.3
    salary_repayment_percentage: float = 65.0

    @property
    def institution_share_percentage(self) -> float:
        """Institution share of installment interest."""
        return 100.0 - self.investor_share_percentage

    @property
    def grace_institution_share_percentage(self) -> float:
        """Institution share of grace-period profit."""
        return 100.0 - self.grace_investor_share_percentage

    def validate(self) -> "ProfitConfig":
        """Check every percentage lies in ``0..100``.

        Returns
        -------
        ProfitConfig
            ``self``, to allow chaining.

        Raises
        ------
        ConfigurationError
            If a percentage is out of range.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{f.name} must be between 0 and 100, got {value}")
        return self


@dataclass
class LedgerConfig:
    """Main configuration for loan-ledger."""

    profit: ProfitConfig = field(default_factory=ProfitConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        profit = ProfitConfig(
            base_interest_rate=_env_float("LEDGER_BASE_INTEREST_RATE", 15.0),
            investor_share_percentage=_env_float("LEDGER_INVESTOR_SHARE", 70.0),
            grace_total_profit_percentage=_env_float("LEDGER_GRACE_TOTAL_PROFIT", 25.0),
            grace_investor_share_percentage=_env_float("LEDGER_GRACE_INVESTOR_SHARE", 33.3),
            salary_repayment_percentage=_env_float("LEDGER_SALARY_REPAYMENT", 65.0),
        ).validate()

        return cls(
            profit=profit,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
