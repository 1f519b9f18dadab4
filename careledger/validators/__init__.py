"""Validation layer for raw billing input."""

from careledger.validators.expense_classifier import ExpenseClassifier, normalize_keys
from careledger.validators.field_validators import FieldValidators
from careledger.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationResult,
    ValidationSeverity,
)

__all__ = [
    "ExpenseClassifier",
    "FieldValidators",
    "normalize_keys",
    "ValidationIssue",
    "ValidationReport",
    "ValidationResult",
    "ValidationSeverity",
]
