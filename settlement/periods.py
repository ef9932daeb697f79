"""Date window helpers for settlement periods."""

import calendar
from datetime import date


def month_period(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got: {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
