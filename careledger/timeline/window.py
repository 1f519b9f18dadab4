"""Merging pages into a shift timeline window.

A merge is a sorted insert plus a dedupe by shift id, so the merged
window does not depend on the order pages arrive in, and merging the
same page twice changes nothing. A shift delivered again replaces the
stored copy.
"""

import datetime as dt
import logging
from typing import Dict, Iterable, List, Optional

from careledger.models.shift import Shift
from careledger.models.timeline import (
    ShiftPage,
    ShiftTimelineWindow,
    TimelineDirection,
)

logger = logging.getLogger(__name__)


def _sort_key(shift: Shift):
    return (shift.start_date, shift.id)


def merge_shifts(existing: Iterable[Shift], incoming: Iterable[Shift]) -> List[Shift]:
    """Merge two shift collections into one sorted, duplicate-free list.

    Args:
        existing: Shifts already loaded
        incoming: Newly fetched shifts (win over existing copies)

    Returns:
        Shifts ascending by start date, unique by id
    """
    by_id: Dict[str, Shift] = {shift.id: shift for shift in existing}
    for shift in incoming:
        by_id[shift.id] = shift
    return sorted(by_id.values(), key=_sort_key)


def _reaches(
    cursor: Optional[dt.datetime], frontier: Optional[dt.datetime], older: bool
) -> bool:
    # A page reaches the frontier when fetched from it or beyond it
    if cursor is None or frontier is None:
        return True
    return cursor <= frontier if older else cursor >= frontier


def merge_page(
    window: ShiftTimelineWindow,
    page: ShiftPage,
    direction: TimelineDirection,
    cursor: Optional[dt.datetime] = None,
) -> ShiftTimelineWindow:
    """Merge one fetched page into a window.

    Cursors move to the earliest and latest loaded start dates. A page
    only updates its direction's ``has_more`` flag when it was fetched
    from at least as far out as anything merged before, so a late page
    from an older request cannot reopen an exhausted direction.

    Args:
        window: Window to merge into
        page: Page fetched in ``direction``
        direction: Side of ``cursor`` the page was fetched from
        cursor: Cursor the page was requested with

    Returns:
        A new ShiftTimelineWindow

    Example:
        >>> window = merge_page(ShiftTimelineWindow(), page, TimelineDirection.AFTER)
        >>> window.ids
        ['s1', 's2']
    """
    items = merge_shifts(window.items, page.items)

    cursor_before = items[0].start_date if items else window.cursor_before or cursor
    cursor_after = items[-1].start_date if items else window.cursor_after or cursor

    has_more_before = window.has_more_before
    has_more_after = window.has_more_after
    if direction == TimelineDirection.BEFORE:
        if _reaches(cursor, window.cursor_before, older=True):
            has_more_before = page.has_more
    elif direction == TimelineDirection.AFTER:
        if _reaches(cursor, window.cursor_after, older=False):
            has_more_after = page.has_more
    else:
        raise ValueError(f"Unknown direction: {direction}")

    logger.debug(
        f"Merged {len(page.items)} shifts {direction.value} {cursor}: "
        f"window now {len(items)} shifts"
    )
    return ShiftTimelineWindow(
        items=items,
        cursor_before=cursor_before,
        cursor_after=cursor_after,
        has_more_before=has_more_before,
        has_more_after=has_more_after,
    )
