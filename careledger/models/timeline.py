"""Shift timeline models.

The timeline is a window over a contact's shifts that grows in both
directions from "today" as pages are loaded before or after it.
"""

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import Field

from careledger.models.base import BaseDataModel
from careledger.models.shift import Shift


class TimelineDirection(str, Enum):
    """Which side of a cursor a page is fetched from."""

    BEFORE = "before"
    AFTER = "after"


class ShiftPage(BaseDataModel):
    """One page of shifts returned by a fetch.

    Attributes:
        items: Shifts strictly before or after the requested cursor
        has_more: Whether more shifts exist beyond this page
    """

    items: List[Shift] = Field(default_factory=list, description="Shifts")
    has_more: bool = Field(False, description="More pages in this direction")


class ShiftTimelineWindow(BaseDataModel):
    """The loaded part of a shift timeline.

    ``items`` is always sorted ascending by start date (ties broken by id)
    and holds each shift id at most once. Windows are only produced by
    merging pages into an existing window.

    Attributes:
        items: Loaded shifts, ascending by start date
        cursor_before: Earliest point loaded so far
        cursor_after: Latest point loaded so far
        has_more_before: Whether older shifts remain to be loaded
        has_more_after: Whether newer shifts remain to be loaded
    """

    items: List[Shift] = Field(default_factory=list, description="Loaded shifts")
    cursor_before: Optional[dt.datetime] = Field(None, description="Older cursor")
    cursor_after: Optional[dt.datetime] = Field(None, description="Newer cursor")
    has_more_before: bool = Field(True, description="Older shifts remain")
    has_more_after: bool = Field(True, description="Newer shifts remain")

    @property
    def ids(self) -> List[str]:
        """Shift ids in window order."""
        return [shift.id for shift in self.items]
