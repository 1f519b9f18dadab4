"""Shift billing calculator.

This module turns a scheduled shift into billable totals:
- Charge for the shift's duration under its rate type
  (Hourly = rate × hours, Daily = rate × started days, Fixed = rate)
- Completing a pending shift, fixing its totals
- Cancelling a pending shift, optionally with a cancellation fee

Completed and fee-bearing cancelled shifts are what the invoice
aggregator turns into billable lines.
"""

import logging
import math
from decimal import Decimal
from typing import Optional

from careledger.calculators.gst_calculator import (
    DEFAULT_GST_RATE,
    GstAmounts,
    Number,
    apply_gst_to_cents,
    round_currency,
)
from careledger.errors import InvalidAmountError
from careledger.models.shift import RateType, Shift, ShiftStatus

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def calculate_shift_total(
    rate_type: RateType,
    rate_amount_excl_gst: Number,
    duration_seconds: int,
    is_gst_free: bool,
    gst_rate: Decimal = DEFAULT_GST_RATE,
) -> GstAmounts:
    """Calculate the charge for a shift.

    Args:
        rate_type: Hourly, Daily or Fixed
        rate_amount_excl_gst: Rate amount excluding GST
        duration_seconds: Shift duration in seconds
        is_gst_free: Whether the shift is GST free
        gst_rate: GST rate as a fraction (default 10%)

    Returns:
        GstAmounts for the shift

    Raises:
        InvalidAmountError: If the duration is negative

    Example:
        >>> calculate_shift_total(RateType.HOURLY, Decimal("65.47"), 3 * 3600, True)
        GstAmounts(amount_excl_gst=Decimal('196.41'), amount_gst=Decimal('0.00'), amount_incl_gst=Decimal('196.41'))
    """
    if duration_seconds < 0:
        raise InvalidAmountError(
            f"duration_seconds cannot be negative, got {duration_seconds}",
            field="duration_seconds",
        )

    rate = round_currency(rate_amount_excl_gst)

    if rate_type == RateType.HOURLY:
        hours = Decimal(duration_seconds) / Decimal(SECONDS_PER_HOUR)
        amount = rate * hours
    elif rate_type == RateType.DAILY:
        # Every started day is charged, with a minimum of one
        days = max(1, math.ceil(duration_seconds / SECONDS_PER_DAY))
        amount = rate * days
    elif rate_type == RateType.FIXED:
        amount = rate
    else:
        raise ValueError(f"Unknown rate type: {rate_type}")

    return apply_gst_to_cents(amount, is_gst_free, gst_rate)


def complete_shift(
    shift: Shift, is_gst_free: bool, gst_rate: Decimal = DEFAULT_GST_RATE
) -> Shift:
    """Complete a pending shift and fix its billable totals.

    Args:
        shift: The shift to complete (must be Pending)
        is_gst_free: GST treatment chosen at completion
        gst_rate: GST rate as a fraction (default 10%)

    Returns:
        A new Shift with status Completed and totals set

    Raises:
        ValueError: If the shift is not pending
    """
    if shift.shift_status != ShiftStatus.PENDING:
        raise ValueError(
            f"Only pending shifts can be completed; shift {shift.id} is "
            f"{shift.shift_status.value}"
        )

    totals = calculate_shift_total(
        shift.rate_type,
        shift.rate_amount_excl_gst,
        shift.duration_seconds,
        is_gst_free,
        gst_rate,
    )
    logger.debug(
        f"Completed shift {shift.id}: {totals.amount_incl_gst} incl GST "
        f"({shift.rate_type.value}, {shift.duration_seconds}s)"
    )
    return shift.model_copy(
        update={
            "shift_status": ShiftStatus.COMPLETED,
            "is_gst_free": is_gst_free,
            "total_excl_gst": totals.amount_excl_gst,
            "total_gst": totals.amount_gst,
            "total_incl_gst": totals.amount_incl_gst,
        }
    )


def cancel_shift(
    shift: Shift,
    reason: str,
    cancellation_amount_excl_gst: Optional[Number] = None,
    is_gst_free: bool = False,
    gst_rate: Decimal = DEFAULT_GST_RATE,
) -> Shift:
    """Cancel a pending shift, optionally charging a cancellation fee.

    Without a fee the shift's totals are zero and it never becomes
    billable.

    Args:
        shift: The shift to cancel (must be Pending)
        reason: Why the shift was cancelled (required)
        cancellation_amount_excl_gst: Optional fee excluding GST
        is_gst_free: Whether the fee is GST free
        gst_rate: GST rate as a fraction (default 10%)

    Returns:
        A new Shift with status Cancelled

    Raises:
        ValueError: If the shift is not pending or no reason is given
        InvalidAmountError: If the fee is negative
    """
    if shift.shift_status != ShiftStatus.PENDING:
        raise ValueError(
            f"Only pending shifts can be cancelled; shift {shift.id} is "
            f"{shift.shift_status.value}"
        )
    if not reason or not reason.strip():
        raise ValueError("Cancellation reason is required")

    if cancellation_amount_excl_gst is None:
        totals = GstAmounts(Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))
        is_gst_free = False
    else:
        totals = apply_gst_to_cents(
            cancellation_amount_excl_gst, is_gst_free, gst_rate
        )

    logger.debug(
        f"Cancelled shift {shift.id} with fee {totals.amount_incl_gst} incl GST"
    )
    return shift.model_copy(
        update={
            "shift_status": ShiftStatus.CANCELLED,
            "cancellation_reason": reason.strip(),
            "is_gst_free": is_gst_free,
            "total_excl_gst": totals.amount_excl_gst,
            "total_gst": totals.amount_gst,
            "total_incl_gst": totals.amount_incl_gst,
        }
    )


def is_shift_billable(shift: Shift) -> bool:
    """Whether a shift carries an amount that can be invoiced.

    Completed shifts are billable; cancelled shifts only with a fee.
    Shifts already attached to an invoice are not.
    """
    if shift.is_invoiced:
        return False
    if shift.shift_status == ShiftStatus.COMPLETED:
        return True
    return (
        shift.shift_status == ShiftStatus.CANCELLED
        and shift.total_incl_gst > Decimal("0.00")
    )
