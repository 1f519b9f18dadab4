"""Shift data model for the billing core.

This module defines the Shift model, a scheduled block of support work
for a contact. Completed (and fee-bearing cancelled) shifts are the
time-based source of invoice lines.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo

from pydantic import (
    AwareDatetime,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from careledger.models.base import BaseDataModel, to_money


class ShiftStatus(str, Enum):
    """Lifecycle status of a shift."""

    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class RateType(str, Enum):
    """How a shift's rate is charged."""

    HOURLY = "Hourly"
    DAILY = "Daily"
    FIXED = "Fixed"


class Shift(BaseDataModel):
    """Represents a single shift.

    Attributes:
        id: Shift identifier
        code: Optional human-facing shift code
        contact_id: Contact (participant) the shift is delivered to
        assignee_id: Staff member assigned to the shift
        summary: Short description of the shift
        start_date: Start of the shift (timezone-aware)
        end_date: End of the shift (timezone-aware)
        tz: IANA zone the shift was scheduled in (optional)
        rate_type: Hourly, Daily or Fixed
        rate_amount_excl_gst: Rate amount excluding GST
        is_gst_free: Whether the shift is GST free
        shift_status: Pending, Completed or Cancelled
        total_excl_gst: Completed total excluding GST
        total_gst: GST component of the completed total
        total_incl_gst: Completed total including GST
        cancellation_reason: Reason given when the shift was cancelled
        invoice_id: Invoice the shift is attached to, if any

    Example:
        >>> shift = Shift(
        ...     id="s1",
        ...     contact_id="c1",
        ...     summary="Community access",
        ...     start_date=dt.datetime(2024, 3, 4, 9, 0, tzinfo=ZoneInfo("UTC")),
        ...     end_date=dt.datetime(2024, 3, 4, 12, 0, tzinfo=ZoneInfo("UTC")),
        ...     rate_amount_excl_gst=Decimal("65.47"),
        ... )
        >>> shift.duration_seconds
        10800
    """

    id: str = Field(..., min_length=1, description="Shift identifier")
    code: Optional[str] = Field(None, description="Shift code")
    contact_id: str = Field(..., min_length=1, description="Contact identifier")
    assignee_id: Optional[str] = Field(None, description="Assigned staff member")
    summary: str = Field("", description="Shift summary")
    start_date: AwareDatetime = Field(..., description="Shift start")
    end_date: AwareDatetime = Field(..., description="Shift end")
    tz: Optional[str] = Field(None, description="IANA timezone of the shift")
    rate_type: RateType = Field(RateType.HOURLY, description="Rate type")
    rate_amount_excl_gst: Decimal = Field(
        Decimal("0.00"), ge=0, description="Rate amount excluding GST"
    )
    is_gst_free: bool = Field(False, description="Whether the shift is GST free")
    shift_status: ShiftStatus = Field(ShiftStatus.PENDING, description="Status")
    total_excl_gst: Decimal = Field(Decimal("0.00"), description="Total excl GST")
    total_gst: Decimal = Field(Decimal("0.00"), description="GST component")
    total_incl_gst: Decimal = Field(Decimal("0.00"), description="Total incl GST")
    cancellation_reason: Optional[str] = Field(None, description="Cancel reason")
    invoice_id: Optional[str] = Field(None, description="Linked invoice")

    @field_validator(
        "rate_amount_excl_gst",
        "total_excl_gst",
        "total_gst",
        "total_incl_gst",
        mode="before",
    )
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert numeric values to 2-place Decimals for precision."""
        return to_money(v)

    @field_validator("tz")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Ensure the timezone, when given, is a known IANA zone."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (KeyError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{v}': {e}")
        return v

    @model_validator(mode="after")
    def validate_dates(self) -> "Shift":
        """Validate that end_date is not before start_date.

        Raises:
            ValueError: If end_date is before start_date
        """
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) cannot be before "
                f"start_date ({self.start_date})"
            )
        return self

    @computed_field  # type: ignore[misc]
    @property
    def duration_seconds(self) -> int:
        """Scheduled duration of the shift in whole seconds."""
        return int((self.end_date - self.start_date).total_seconds())

    @property
    def is_invoiced(self) -> bool:
        """Whether the shift is already attached to an invoice."""
        return self.invoice_id is not None

    def local_date(self, default_tz: str) -> dt.date:
        """Calendar day the shift starts on, in its own or the given zone.

        Args:
            default_tz: Zone used when the shift carries no ``tz``

        Returns:
            The local calendar date of ``start_date``
        """
        zone = ZoneInfo(self.tz or default_tz)
        return self.start_date.astimezone(zone).date()
