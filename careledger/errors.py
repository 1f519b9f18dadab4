"""Error taxonomy for the billing core.

Validation failures are normally returned inside a ``ValidationResult``
so callers can show field-level feedback. The exceptions here are raised
by the primitive calculators, and by ``ValidationResult.unwrap`` for
callers that prefer exceptions.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from careledger.validators.validation_report import ValidationReport


class ErrorCode(str, Enum):
    """Machine-readable codes for recoverable validation failures."""

    INVALID_AMOUNT = "InvalidAmount"
    MISSING_FIELD = "MissingField"
    ALREADY_INVOICED = "AlreadyInvoiced"
    IMMUTABLE_LINE_SET = "ImmutableLineSet"
    NEGATIVE_RECEIPT = "NegativeReceipt"
    INVALID_DATE_RANGE = "InvalidDateRange"


class BillingError(Exception):
    """Base exception for billing core errors."""

    code: Optional[ErrorCode] = None

    def __init__(self, message: str, field: Optional[str] = None):
        """
        Initialize billing error.

        Args:
            message: Error message
            field: Name of the offending field, if any
        """
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidAmountError(BillingError, ValueError):
    """Raised by calculators for negative or otherwise invalid amounts."""

    code = ErrorCode.INVALID_AMOUNT


class BillingValidationError(BillingError):
    """Raised when an invalid ``ValidationResult`` is unwrapped."""

    def __init__(self, report: "ValidationReport"):
        """
        Initialize from a validation report.

        Args:
            report: The report holding the errors
        """
        self.report = report
        errors = report.get_errors()
        first = errors[0] if errors else None
        super().__init__(report.summary(), field=first.field if first else None)
        self.code = first.code if first else None
