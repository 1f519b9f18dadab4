"""Bidirectional cursor-paginated shift timeline.

``ShiftTimeline`` owns one window over a contact's shifts. The first load
starts at the beginning of the organization's today and later loads
extend the window backwards or forwards one page at a time. Loads on one
timeline are serialized; each fetched page is merged exactly once.
"""

import asyncio
import datetime as dt
import logging
from typing import TYPE_CHECKING, List, Optional

from careledger.models.timeline import (
    ShiftPage,
    ShiftTimelineWindow,
    TimelineDirection,
)
from careledger.timeline.grouping import (
    DayGroup,
    group_by_day,
    start_of_day,
    today_in_timezone,
)
from careledger.timeline.window import merge_page

if TYPE_CHECKING:
    from careledger.services.interfaces import ShiftPageFetcher

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class ShiftTimeline:
    """Paged view over one contact's shifts.

    Example:
        >>> timeline = ShiftTimeline(fetcher, "c1", "Australia/Sydney")
        >>> await timeline.load_initial()
        >>> await timeline.load_more_before()
        >>> [group.day for group in timeline.groups()]
    """

    def __init__(
        self,
        fetcher: "ShiftPageFetcher",
        contact_id: Optional[str],
        timezone: str,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize the timeline.

        Args:
            fetcher: Source of shift pages
            contact_id: Contact whose shifts are shown (None for all)
            timezone: Organization IANA zone, used for "today"
            page_size: Shifts requested per page
        """
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.fetcher = fetcher
        self.contact_id = contact_id
        self.timezone = timezone
        self.page_size = page_size
        self.window = ShiftTimelineWindow()
        self._lock = asyncio.Lock()

    def today(self, now: Optional[dt.datetime] = None) -> dt.date:
        """The organization's current day."""
        return today_in_timezone(self.timezone, now)

    async def load_initial(
        self,
        before: Optional[dt.datetime] = None,
        after: Optional[dt.datetime] = None,
        now: Optional[dt.datetime] = None,
    ) -> ShiftTimelineWindow:
        """Load the first page.

        With no cursor the page is fetched after the start of today in
        the organization's zone. Only one direction is fetched per call.

        Args:
            before: Fetch the page before this cursor instead
            after: Fetch the page after this cursor instead
            now: Current instant, for computing today

        Returns:
            The window after the merge

        Raises:
            ValueError: If both cursors are given
        """
        if before is not None and after is not None:
            raise ValueError("Only one of before or after may be given per load")
        if before is not None:
            return await self._load(TimelineDirection.BEFORE, before)
        if after is None:
            after = start_of_day(self.today(now), self.timezone)
        return await self._load(TimelineDirection.AFTER, after)

    async def load_more_before(
        self, cursor: Optional[dt.datetime] = None
    ) -> ShiftTimelineWindow:
        """Load the page strictly before ``cursor`` (default: earliest loaded)."""
        return await self._load(TimelineDirection.BEFORE, cursor)

    async def load_more_after(
        self, cursor: Optional[dt.datetime] = None
    ) -> ShiftTimelineWindow:
        """Load the page strictly after ``cursor`` (default: latest loaded)."""
        return await self._load(TimelineDirection.AFTER, cursor)

    def groups(self, today: Optional[dt.date] = None) -> List[DayGroup]:
        """Loaded shifts grouped by local day, always including today."""
        return group_by_day(self.window.items, self.timezone, today or self.today())

    async def _load(
        self, direction: TimelineDirection, cursor: Optional[dt.datetime]
    ) -> ShiftTimelineWindow:
        async with self._lock:
            # Default cursors are read under the lock so queued loads see earlier merges
            if cursor is None:
                if direction == TimelineDirection.BEFORE:
                    cursor = self.window.cursor_before
                else:
                    cursor = self.window.cursor_after
            if cursor is None:
                cursor = start_of_day(self.today(), self.timezone)
            logger.debug(
                f"Fetching shifts {direction.value} {cursor.isoformat()} "
                f"for {self.contact_id}"
            )
            page: ShiftPage = await self.fetcher.fetch_shifts_page(
                self.contact_id, direction, cursor, self.page_size
            )
            self.window = merge_page(self.window, page, direction, cursor)
            logger.info(
                f"Loaded {len(page.items)} shifts {direction.value}; "
                f"{len(self.window.items)} in window"
            )
            return self.window
