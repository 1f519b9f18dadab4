"""Reporting period helpers.

Fiscal years start on a configurable month and day (1 July by default,
the Australian financial year). Ranges are inclusive on both ends.
"""

import calendar
import datetime as dt
from dataclasses import dataclass


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days.

    Attributes:
        start: First day of the range
        end: Last day of the range
    """

    start: dt.date
    end: dt.date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) cannot be before start ({self.start})")

    def __contains__(self, day: dt.date) -> bool:
        return self.start <= day <= self.end


def _fiscal_year_start(year: int, start_month: int, start_day: int) -> dt.date:
    # Clamp so a 31st start day still works in shorter months
    last_day = calendar.monthrange(year, start_month)[1]
    return dt.date(year, start_month, min(start_day, last_day))


def current_fiscal_year(
    today: dt.date, start_month: int = 7, start_day: int = 1
) -> DateRange:
    """Get the fiscal year containing ``today``.

    Args:
        today: Reference day
        start_month: Month the fiscal year starts in (1-12)
        start_day: Day of month the fiscal year starts on

    Returns:
        DateRange covering the fiscal year

    Example:
        >>> current_fiscal_year(dt.date(2024, 3, 15))
        DateRange(start=datetime.date(2023, 7, 1), end=datetime.date(2024, 6, 30))
    """
    if not 1 <= start_month <= 12:
        raise ValueError(f"start_month must be 1-12, got {start_month}")

    start = _fiscal_year_start(today.year, start_month, start_day)
    if today < start:
        start = _fiscal_year_start(today.year - 1, start_month, start_day)
    next_start = _fiscal_year_start(start.year + 1, start_month, start_day)
    return DateRange(start=start, end=next_start - dt.timedelta(days=1))


def previous_fiscal_year(
    today: dt.date, start_month: int = 7, start_day: int = 1
) -> DateRange:
    """Get the fiscal year before the one containing ``today``."""
    current = current_fiscal_year(today, start_month, start_day)
    return current_fiscal_year(
        current.start - dt.timedelta(days=1), start_month, start_day
    )


def month_range(year: int, month: int) -> DateRange:
    """Get the range covering one calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(start=dt.date(year, month, 1), end=dt.date(year, month, last_day))
