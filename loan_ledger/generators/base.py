"""Base generator class for all record generators."""

from __future__ import annotations

import random
from abc import ABC
from datetime import date, timedelta

from faker import Faker


class BaseGenerator(ABC):
    """Base class for all record generators.

    Provides common initialization: Faker instance creation and seed-based
    reproducibility. Generated dates are anchored on ``as_of`` rather than the
    clock so a seeded run always yields the same office.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    as_of : date | None
        Reference day for generated dates (default: today).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        as_of: date | None = None,
    ) -> None:
        self.fake = Faker(locale)
        self.rng = random.Random(seed)
        self.as_of = as_of or date.today()
        if seed is not None:
            self.fake.seed_instance(seed)

    def _past_day(self, min_days: int, max_days: int) -> date:
        """Random day between ``max_days`` and ``min_days`` before ``as_of``."""
        return self.as_of - timedelta(days=self.rng.randint(min_days, max_days))

    def _new_id(self) -> str:
        return self.fake.uuid4()
