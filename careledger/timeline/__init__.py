"""Shift timeline: paged loading, merging and day grouping."""

from careledger.timeline.grouping import (
    DayGroup,
    group_by_day,
    start_of_day,
    today_in_timezone,
)
from careledger.timeline.paginator import DEFAULT_PAGE_SIZE, ShiftTimeline
from careledger.timeline.window import merge_page, merge_shifts

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DayGroup",
    "ShiftTimeline",
    "group_by_day",
    "merge_page",
    "merge_shifts",
    "start_of_day",
    "today_in_timezone",
]
