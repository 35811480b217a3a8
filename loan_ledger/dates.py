"""Day-granularity date helpers.

Every comparison between a due date and the evaluation date goes through
:func:`normalize_to_day` so that an obligation due "today" is never read as
overdue because of the time of day.
"""

from datetime import date, datetime
from typing import Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from loan_ledger.exceptions import MissingEvaluationDateError

DateLike = Union[date, datetime, str, None]


def normalize_to_day(value: date | datetime) -> date:
    """Truncate a timestamp to its calendar day.

    Timezone-aware datetimes are converted to local time first.

    Parameters
    ----------
    value : date | datetime
        Timestamp to truncate.

    Returns
    -------
    date
        The calendar day of ``value``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def parse_date(value: object) -> date | None:
    """Parse a record date field, returning ``None`` when it is unusable."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return normalize_to_day(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return normalize_to_day(date_parser.isoparse(text))
        except (ValueError, OverflowError):
            return None
    return None


def is_valid_date(value: object) -> bool:
    """Return ``True`` when ``value`` can be read as a calendar date."""
    return parse_date(value) is not None


def require_evaluation_day(evaluation_date: date | datetime | None) -> date:
    """Normalize the caller-supplied evaluation date.

    Raises
    ------
    MissingEvaluationDateError
        If no evaluation date was supplied.
    """
    if evaluation_date is None:
        raise MissingEvaluationDateError("an evaluation date is required")
    if not isinstance(evaluation_date, (date, datetime)):
        raise MissingEvaluationDateError(
            f"evaluation date must be a date or datetime, got {type(evaluation_date).__name__}"
        )
    return normalize_to_day(evaluation_date)


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping to the last day of short months."""
    return start + relativedelta(months=months)


def days_between(later: date, earlier: date) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).days
