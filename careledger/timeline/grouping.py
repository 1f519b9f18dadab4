"""Grouping timeline shifts into calendar days.

Days are the shift's local calendar day in the organization's zone, and
"today" always has a group, even an empty one, so the view keeps its
anchor.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from careledger.models.shift import Shift


@dataclass
class DayGroup:
    """Shifts starting on one local calendar day.

    Attributes:
        day: The calendar day
        shifts: Shifts starting that day, ascending by start date
        is_today: Whether ``day`` is the organization's today
    """

    day: dt.date
    shifts: List[Shift] = field(default_factory=list)
    is_today: bool = False


def today_in_timezone(timezone: str, now: Optional[dt.datetime] = None) -> dt.date:
    """Get the current calendar day in an IANA zone.

    Args:
        timezone: IANA zone name, e.g. "Australia/Sydney"
        now: Instant to convert (defaults to the current time); a naive
            value is taken to be UTC

    Returns:
        The local date in ``timezone``
    """
    zone = ZoneInfo(timezone)
    if now is None:
        return dt.datetime.now(zone).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    return now.astimezone(zone).date()


def start_of_day(day: dt.date, timezone: str) -> dt.datetime:
    """Midnight at the start of ``day`` in an IANA zone, as an aware datetime."""
    return dt.datetime.combine(day, dt.time.min, tzinfo=ZoneInfo(timezone))


def group_by_day(
    shifts: Iterable[Shift], timezone: str, today: dt.date
) -> List[DayGroup]:
    """Bucket shifts by their local start day.

    Args:
        shifts: Shifts to group
        timezone: Organization zone for shifts without their own
        today: The organization's current day

    Returns:
        Day groups in ascending date order, always including ``today``
    """
    groups: Dict[dt.date, DayGroup] = {today: DayGroup(day=today, is_today=True)}
    for shift in sorted(shifts, key=lambda s: (s.start_date, s.id)):
        day = shift.local_date(timezone)
        if day not in groups:
            groups[day] = DayGroup(day=day)
        groups[day].shifts.append(shift)
    return [groups[day] for day in sorted(groups)]
