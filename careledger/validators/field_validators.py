"""Field-level validators for raw billing input.

This module provides validators for individual raw fields such as
amounts, whole numbers, flags, dates and required strings. Each
validator records problems on a ValidationReport and returns the parsed
value (or None when the field is unusable).
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from careledger.errors import ErrorCode
from careledger.models.base import to_decimal
from careledger.validators.validation_report import ValidationReport


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class FieldValidators:
    """Collection of field-level validation methods.

    This class provides static methods for validating individual fields
    of raw expense, receipt and invoice input.
    """

    @staticmethod
    def require_string(
        value: Any,
        field_name: str,
        report: ValidationReport,
    ) -> Optional[str]:
        """Validate that a string is present and not whitespace.

        Args:
            value: The raw value to validate
            field_name: Name of the field being validated
            report: ValidationReport to collect issues

        Returns:
            The stripped string, or None if missing
        """
        if _is_missing(value):
            report.add_error(
                field_name, f"{field_name} is required", value, ErrorCode.MISSING_FIELD
            )
            return None

        if not isinstance(value, str):
            report.add_error(
                field_name,
                f"Expected string, got {type(value).__name__}",
                value,
                ErrorCode.MISSING_FIELD,
            )
            return None

        return value.strip()

    @staticmethod
    def parse_amount(
        value: Any,
        field_name: str,
        report: ValidationReport,
        allow_zero: bool = True,
    ) -> Optional[Decimal]:
        """Validate a money amount and convert it to Decimal.

        Args:
            value: The raw amount
            field_name: Name of the field being validated
            report: ValidationReport to collect issues
            allow_zero: Whether 0 is acceptable (False means strictly > 0)

        Returns:
            The amount as a Decimal, or None if missing or invalid
        """
        if _is_missing(value):
            report.add_error(
                field_name, f"{field_name} is required", value, ErrorCode.MISSING_FIELD
            )
            return None

        try:
            amount = to_decimal(value)
        except ValueError:
            report.add_error(
                field_name,
                f"{field_name} must be a number",
                value,
                ErrorCode.INVALID_AMOUNT,
            )
            return None

        if amount < 0 or (amount == 0 and not allow_zero):
            bound = "at least 0" if allow_zero else "greater than 0"
            report.add_error(
                field_name,
                f"{field_name} must be {bound}",
                value,
                ErrorCode.INVALID_AMOUNT,
            )
            return None

        return amount

    @staticmethod
    def parse_whole_number(
        value: Any,
        field_name: str,
        report: ValidationReport,
        min_val: int = 0,
    ) -> Optional[int]:
        """Validate an integer field with a lower bound.

        Integral Decimals and floats (e.g. ``120.0``) are accepted.

        Args:
            value: The raw value
            field_name: Name of the field being validated
            report: ValidationReport to collect issues
            min_val: Minimum allowed value (inclusive)

        Returns:
            The value as an int, or None if missing or invalid
        """
        if _is_missing(value):
            report.add_error(
                field_name, f"{field_name} is required", value, ErrorCode.MISSING_FIELD
            )
            return None

        try:
            number = to_decimal(value)
        except ValueError:
            number = None

        if number is None or number != number.to_integral_value():
            report.add_error(
                field_name,
                f"{field_name} must be a whole number",
                value,
                ErrorCode.INVALID_AMOUNT,
            )
            return None

        if number < min_val:
            report.add_error(
                field_name,
                f"{field_name} must be at least {min_val}",
                value,
                ErrorCode.INVALID_AMOUNT,
            )
            return None

        return int(number)

    @staticmethod
    def require_flag(
        value: Any,
        field_name: str,
        report: ValidationReport,
    ) -> Optional[bool]:
        """Validate that a boolean flag is explicitly set.

        There is no implicit default: a missing flag is an error.

        Args:
            value: The raw value
            field_name: Name of the field being validated
            report: ValidationReport to collect issues

        Returns:
            The flag, or None if missing
        """
        if not isinstance(value, bool):
            report.add_error(
                field_name,
                f"{field_name} must be explicitly set to true or false",
                value,
                ErrorCode.MISSING_FIELD,
            )
            return None
        return value

    @staticmethod
    def parse_date(
        value: Any,
        field_name: str,
        report: ValidationReport,
        required: bool = True,
    ) -> Optional[dt.date]:
        """Validate a date given as a date, datetime or ISO string.

        Args:
            value: The raw value
            field_name: Name of the field being validated
            report: ValidationReport to collect issues
            required: Whether a missing date is an error

        Returns:
            The date, or None if missing or invalid
        """
        if _is_missing(value):
            if required:
                report.add_error(
                    field_name,
                    f"{field_name} is required",
                    value,
                    ErrorCode.MISSING_FIELD,
                )
            return None

        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value

        try:
            # Tolerate timestamps such as "2024-03-01T00:00:00Z"
            return dt.date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            report.add_error(
                field_name,
                f"{field_name} is not a valid date",
                value,
                ErrorCode.MISSING_FIELD,
            )
            return None
