"""Validation report and typed results for billing operations."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from careledger.errors import BillingValidationError, ErrorCode

T = TypeVar("T")


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """Represents a single validation issue.

    Attributes:
        severity: The severity level of the issue
        field: The field name that has the issue
        message: Human-readable description of the issue
        value: The value that caused the issue
        code: Machine-readable error code (errors only)
        context: Optional context information (e.g., expense id)
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any
    code: Optional[ErrorCode] = None
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        """Return string representation of the issue.

        Returns:
            Formatted string with severity, code, field, and message
        """
        severity_name = self.severity.name
        code_str = f" {self.code.value}" if self.code else ""
        context_str = ""
        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            context_str = f" ({', '.join(context_parts)})"

        return f"[{severity_name}{code_str}] {self.field}: {self.message}{context_str}"


class ValidationReport:
    """Collects and manages validation issues.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("kms", "kms is required", None, ErrorCode.MISSING_FIELD)
        >>> report.is_valid()
        False
        >>> report.codes()
        [<ErrorCode.MISSING_FIELD: 'MissingField'>]
    """

    def __init__(self) -> None:
        """Initialize an empty validation report."""
        self.issues: List[ValidationIssue] = []

    @property
    def error_count(self) -> int:
        """Get the number of errors in the report."""
        return sum(
            1 for issue in self.issues if issue.severity == ValidationSeverity.ERROR
        )

    @property
    def warning_count(self) -> int:
        """Get the number of warnings in the report."""
        return sum(
            1 for issue in self.issues if issue.severity == ValidationSeverity.WARNING
        )

    def is_valid(self) -> bool:
        """Check if validation passed (no errors).

        Warnings do not affect validity.
        """
        return self.error_count == 0

    def has_errors(self) -> bool:
        """Check if the report has any errors."""
        return self.error_count > 0

    def add_error(
        self,
        field: str,
        message: str,
        value: Any,
        code: ErrorCode,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an error to the report.

        Args:
            field: The field name with the error
            message: Human-readable error description
            value: The value that caused the error
            code: Error code for the failure
            context: Optional context information
        """
        self.issues.append(
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                field=field,
                message=message,
                value=value,
                code=code,
                context=context,
            )
        )

    def add_warning(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add a warning to the report.

        Args:
            field: The field name with the warning
            message: Human-readable warning description
            value: The value that triggered the warning
            context: Optional context information
        """
        self.issues.append(
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                field=field,
                message=message,
                value=value,
                context=context,
            )
        )

    def get_errors(self) -> List[ValidationIssue]:
        """Get all error-level issues."""
        return [
            issue for issue in self.issues if issue.severity == ValidationSeverity.ERROR
        ]

    def get_warnings(self) -> List[ValidationIssue]:
        """Get all warning-level issues."""
        return [
            issue
            for issue in self.issues
            if issue.severity == ValidationSeverity.WARNING
        ]

    def codes(self) -> List[ErrorCode]:
        """Error codes in the order the errors were found."""
        return [issue.code for issue in self.get_errors() if issue.code is not None]

    def fields(self) -> List[str]:
        """Field names of the errors, in the order they were found."""
        return [issue.field for issue in self.get_errors()]

    def merge(self, other: "ValidationReport") -> None:
        """Merge another validation report into this one."""
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Get a summary of the validation report.

        Returns:
            Summary string with counts of errors and warnings
        """
        parts = []
        if self.error_count > 0:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")

        if not parts:
            return "No issues found"

        return ", ".join(parts)

    def format(self) -> str:
        """Format the validation report for display."""
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]

        errors = self.get_errors()
        if errors:
            lines.append("\nERRORS:")
            for issue in errors:
                lines.append(f"  - {issue}")

        warnings = self.get_warnings()
        if warnings:
            lines.append("\nWARNINGS:")
            for issue in warnings:
                lines.append(f"  - {issue}")

        return "\n".join(lines)


@dataclass
class ValidationResult(Generic[T]):
    """Outcome of a billing operation: a value, or a report of errors.

    Attributes:
        value: The produced value; None when validation failed
        report: Issues found (warnings may accompany a value)

    Example:
        >>> result = classifier.validate({"expense_type": "Kilometre"})
        >>> if not result.is_valid():
        ...     print(result.report.format())
    """

    value: Optional[T] = None
    report: ValidationReport = field(default_factory=ValidationReport)

    @classmethod
    def success(
        cls, value: T, report: Optional[ValidationReport] = None
    ) -> "ValidationResult[T]":
        """Build a successful result, optionally carrying warnings."""
        return cls(value=value, report=report or ValidationReport())

    @classmethod
    def failure(cls, report: ValidationReport) -> "ValidationResult[T]":
        """Build a failed result from a report holding errors."""
        return cls(value=None, report=report)

    @classmethod
    def error(
        cls, field: str, message: str, value: Any, code: ErrorCode
    ) -> "ValidationResult[T]":
        """Build a failed result holding a single error."""
        report = ValidationReport()
        report.add_error(field, message, value, code)
        return cls(value=None, report=report)

    def is_valid(self) -> bool:
        """True when a value was produced and no errors were recorded."""
        return self.value is not None and self.report.is_valid()

    @property
    def errors(self) -> List[ValidationIssue]:
        """Error-level issues of the result."""
        return self.report.get_errors()

    def unwrap(self) -> T:
        """Return the value or raise ``BillingValidationError``.

        Raises:
            BillingValidationError: If the result holds errors
        """
        if not self.is_valid() or self.value is None:
            raise BillingValidationError(self.report)
        return self.value
