"""GST calculator for the billing core.

This module implements the money rules shared by every billable amount:
- Applying GST to an exclusive amount (or not, for GST-free lines)
- Splitting a GST-inclusive amount into its exclusive and GST parts
- Deriving kilometre expense amounts from a rate and a distance

GST and inclusive amounts are rounded half-up to cents. Functions are pure.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from careledger.errors import InvalidAmountError
from careledger.models.base import CENT, to_decimal

DEFAULT_GST_RATE = Decimal("0.10")

Number = Union[str, int, float, Decimal]


@dataclass(frozen=True)
class GstAmounts:
    """Exclusive, GST and inclusive parts of one amount.

    Attributes:
        amount_excl_gst: Amount excluding GST
        amount_gst: GST component
        amount_incl_gst: Amount including GST

    Example:
        >>> apply_gst(Decimal("100.00"), is_gst_free=False)
        GstAmounts(amount_excl_gst=Decimal('100.00'), amount_gst=Decimal('10.00'), amount_incl_gst=Decimal('110.00'))
    """

    amount_excl_gst: Decimal
    amount_gst: Decimal
    amount_incl_gst: Decimal


def round_currency(value: Number) -> Decimal:
    """Round a value half-up to cents.

    Args:
        value: Amount to round

    Returns:
        Decimal quantized to 0.01
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _checked_amount(value: Number, field: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError as e:
        raise InvalidAmountError(str(e), field=field)

    if amount < 0:
        raise InvalidAmountError(
            f"{field} cannot be negative, got {amount}", field=field
        )
    return amount


def apply_gst(
    amount_excl_gst: Number,
    is_gst_free: bool,
    gst_rate: Decimal = DEFAULT_GST_RATE,
) -> GstAmounts:
    """Calculate GST and the inclusive amount for an exclusive amount.

    GST-free: GST is 0 and the inclusive amount equals the exclusive one.
    Otherwise: GST = round(excl × rate), incl = round(excl × (1 + rate)).
    The exclusive amount is returned as given; GST and the inclusive
    amount are rounded half-up to cents. Use ``apply_gst_to_cents`` when
    the three parts must balance to the cent.

    Args:
        amount_excl_gst: Amount excluding GST (must not be negative)
        is_gst_free: Whether the amount is GST free
        gst_rate: GST rate as a fraction (default 10%)

    Returns:
        GstAmounts for the amount

    Raises:
        InvalidAmountError: If amount_excl_gst is negative or not a number

    Example:
        >>> apply_gst(Decimal("102.00"), is_gst_free=False).amount_incl_gst
        Decimal('112.20')
        >>> apply_gst(Decimal("0.045"), is_gst_free=True).amount_incl_gst
        Decimal('0.045')
    """
    excl = _checked_amount(amount_excl_gst, "amount_excl_gst")

    if is_gst_free:
        return GstAmounts(
            amount_excl_gst=excl,
            amount_gst=Decimal("0.00"),
            amount_incl_gst=excl,
        )

    return GstAmounts(
        amount_excl_gst=excl,
        amount_gst=round_currency(excl * gst_rate),
        amount_incl_gst=round_currency(excl * (Decimal("1") + gst_rate)),
    )


def apply_gst_to_cents(
    amount_excl_gst: Number,
    is_gst_free: bool,
    gst_rate: Decimal = DEFAULT_GST_RATE,
) -> GstAmounts:
    """Round an exclusive amount to cents, then apply GST.

    Used for amounts that become invoice lines, so that
    ``excl + gst == incl`` holds exactly.

    Raises:
        InvalidAmountError: If amount_excl_gst is negative or not a number

    Example:
        >>> apply_gst_to_cents(Decimal("10.005"), is_gst_free=False)
        GstAmounts(amount_excl_gst=Decimal('10.01'), amount_gst=Decimal('1.00'), amount_incl_gst=Decimal('11.01'))
    """
    excl = _checked_amount(amount_excl_gst, "amount_excl_gst")
    return apply_gst(round_currency(excl), is_gst_free, gst_rate)


def split_gst_inclusive(
    amount_incl_gst: Number,
    is_gst_free: bool = False,
    gst_rate: Decimal = DEFAULT_GST_RATE,
) -> GstAmounts:
    """Split a GST-inclusive amount into exclusive and GST parts.

    The exclusive part is rounded and GST takes the remainder, so the
    parts always add back to the inclusive amount.

    Args:
        amount_incl_gst: Amount including GST
        is_gst_free: Whether the amount is GST free
        gst_rate: GST rate as a fraction (default 10%)

    Returns:
        GstAmounts whose parts sum exactly to amount_incl_gst

    Example:
        >>> split_gst_inclusive(Decimal("300.00")).amount_excl_gst
        Decimal('272.73')
    """
    incl = round_currency(amount_incl_gst)
    if is_gst_free:
        return GstAmounts(
            amount_excl_gst=incl, amount_gst=Decimal("0.00"), amount_incl_gst=incl
        )

    excl = round_currency(incl / (Decimal("1") + gst_rate))
    return GstAmounts(
        amount_excl_gst=excl,
        amount_gst=incl - excl,
        amount_incl_gst=incl,
    )


def calculate_kilometre_amounts(
    km_rate_amount_excl_gst: Number,
    kms: int,
    is_gst_free: bool,
    gst_rate: Decimal = DEFAULT_GST_RATE,
) -> GstAmounts:
    """Derive kilometre expense amounts from a rate and a distance.

    amount_excl_gst = round(rate × kms), then GST per ``apply_gst_to_cents``.

    Args:
        km_rate_amount_excl_gst: Rate per kilometre excluding GST
        kms: Kilometres travelled
        is_gst_free: Whether the expense is GST free
        gst_rate: GST rate as a fraction (default 10%)

    Returns:
        GstAmounts for the trip

    Raises:
        InvalidAmountError: If the rate or distance is negative

    Example:
        >>> amounts = calculate_kilometre_amounts(Decimal("0.85"), 120, False)
        >>> amounts.amount_excl_gst, amounts.amount_gst, amounts.amount_incl_gst
        (Decimal('102.00'), Decimal('10.20'), Decimal('112.20'))
    """
    rate = _checked_amount(km_rate_amount_excl_gst, "km_rate_amount_excl_gst")
    if kms < 0:
        raise InvalidAmountError(f"kms cannot be negative, got {kms}", field="kms")

    return apply_gst_to_cents(rate * kms, is_gst_free, gst_rate)
