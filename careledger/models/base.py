"""Base model for all data models in the billing core.

This module provides a base Pydantic model with common configuration
and helper methods for serialization/deserialization.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict

CENT = Decimal("0.01")


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - Serialization to/from dictionaries
    - Immutability (frozen models); updates go through ``model_copy``
    - Arbitrary types support for dates, datetimes, decimals

    Example:
        >>> class Contact(BaseDataModel):
        ...     name: str
        >>> contact = Contact(name="Alice")
        >>> contact.model_dump()
        {'name': 'Alice'}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date, datetime
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        extra="forbid",
        # Ledger values are replaced, never edited in place
        frozen=True,
    )


def to_decimal(v: Union[str, int, float, Decimal]) -> Decimal:
    """Convert a numeric value to a finite Decimal without rounding.

    Floats go through ``str`` first so ``0.85`` stays ``0.85``.

    Raises:
        ValueError: If the value cannot be converted to Decimal
    """
    if isinstance(v, bool):
        raise ValueError(f"Cannot convert {v!r} to Decimal")
    if not isinstance(v, Decimal):
        try:
            v = Decimal(str(v))
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ValueError(f"Cannot convert {v} to Decimal: {e}")
    if not v.is_finite():
        raise ValueError(f"Amount must be finite, got {v}")
    return v


def to_money(v: Union[str, int, float, Decimal]) -> Decimal:
    """Convert a numeric value to a 2-place Decimal (ROUND_HALF_UP)."""
    return to_decimal(v).quantize(CENT, rounding=ROUND_HALF_UP)
