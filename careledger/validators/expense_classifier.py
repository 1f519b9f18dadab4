"""Expense classifier: validation and normalization of raw expenses.

This module turns raw expense input (as submitted by a form or API) into
a validated Expense of one of the three variants:

- Business: payee and amounts entered directly
- Reclaimable: like Business, but tied to a contact for later invoicing
- Kilometre: amounts derived from rate × kms; supplied amounts ignored

Every problem found is reported, not only the first.
"""

import logging
import re
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from careledger.calculators.gst_calculator import (
    DEFAULT_GST_RATE,
    calculate_kilometre_amounts,
    round_currency,
)
from careledger.errors import ErrorCode
from careledger.models.expense import Expense, ExpenseType
from careledger.validators.field_validators import FieldValidators
from careledger.validators.validation_report import (
    ValidationReport,
    ValidationResult,
)

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Fields copied through unchanged when present
_COMMON_FIELDS = (
    "id",
    "description",
    "payment_method",
    "shift_id",
    "invoice_id",
)

# Original API field names that do not follow the snake_case rule
_FIELD_ALIASES = {
    "id_contact": "contact_id",
    "id_shift": "shift_id",
    "id_invoice": "invoice_id",
    "id_category": "category",
}


def normalize_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert camelCase input keys (``amountInclGst``) to snake_case.

    Args:
        raw: Raw input mapping

    Returns:
        New dict with snake_case keys
    """
    normalized = {}
    for key, value in raw.items():
        snake = _CAMEL_BOUNDARY.sub("_", key).lower()
        normalized[_FIELD_ALIASES.get(snake, snake)] = value
    return normalized


class ExpenseClassifier:
    """Validates raw expenses and derives their billable amounts.

    Example:
        >>> classifier = ExpenseClassifier()
        >>> result = classifier.validate({
        ...     "expense_type": "Kilometre",
        ...     "contact_id": "c1",
        ...     "km_rate_amount_excl_gst": "0.85",
        ...     "kms": 120,
        ...     "is_gst_free": False,
        ... })
        >>> result.unwrap().amount_incl_gst
        Decimal('112.20')
    """

    def __init__(self, gst_rate: Decimal = DEFAULT_GST_RATE) -> None:
        """Initialize the classifier.

        Args:
            gst_rate: GST rate used for derived kilometre amounts
        """
        self.gst_rate = gst_rate

    def validate(self, raw: Mapping[str, Any]) -> ValidationResult[Expense]:
        """Validate a raw expense and normalize it into an Expense.

        Args:
            raw: Raw expense fields (snake_case or camelCase keys)

        Returns:
            ValidationResult holding the Expense or the errors found
        """
        data = normalize_keys(raw)
        report = ValidationReport()

        expense_type = self._parse_expense_type(data.get("expense_type"), report)
        if expense_type is None:
            return ValidationResult.failure(report)

        fields: Dict[str, Any] = {"expense_type": expense_type}
        for name in _COMMON_FIELDS:
            if data.get(name) is not None:
                fields[name] = data[name]
        expense_date = FieldValidators.parse_date(
            data.get("date"), "date", report, required=False
        )
        if expense_date is not None:
            fields["date"] = expense_date

        if expense_type == ExpenseType.BUSINESS:
            self._validate_business(data, fields, report)
        elif expense_type == ExpenseType.RECLAIMABLE:
            self._validate_reclaimable(data, fields, report)
        elif expense_type == ExpenseType.KILOMETRE:
            self._validate_kilometre(data, fields, report)
        else:
            raise ValueError(f"Unhandled expense type: {expense_type}")

        if not report.is_valid():
            logger.debug(
                f"Rejected {expense_type.value} expense: {report.summary()}"
            )
            return ValidationResult.failure(report)

        try:
            expense = Expense(**fields)
        except ValidationError as e:
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "expense"
                code = (
                    ErrorCode.MISSING_FIELD
                    if error["type"] == "missing"
                    else ErrorCode.INVALID_AMOUNT
                )
                report.add_error(field, error["msg"], error.get("input"), code)
            return ValidationResult.failure(report)

        return ValidationResult.success(expense, report)

    def _parse_expense_type(
        self, value: Any, report: ValidationReport
    ) -> Optional[ExpenseType]:
        if value is None or value == "":
            report.add_error(
                "expense_type", "expense_type is required", value, ErrorCode.MISSING_FIELD
            )
            return None
        try:
            return ExpenseType(value)
        except ValueError:
            allowed = ", ".join(t.value for t in ExpenseType)
            report.add_error(
                "expense_type",
                f"expense_type must be one of: {allowed}",
                value,
                ErrorCode.MISSING_FIELD,
            )
            return None

    def _validate_entered_amounts(
        self, data: Dict[str, Any], fields: Dict[str, Any], report: ValidationReport
    ) -> None:
        """Check directly-entered amounts: incl > 0, 0 <= gst <= incl."""
        amount_incl_gst = FieldValidators.parse_amount(
            data.get("amount_incl_gst"), "amount_incl_gst", report, allow_zero=False
        )
        amount_gst = FieldValidators.parse_amount(
            data.get("amount_gst"), "amount_gst", report
        )
        if amount_incl_gst is None or amount_gst is None:
            return

        if amount_gst > amount_incl_gst:
            report.add_error(
                "amount_gst",
                f"amount_gst ({amount_gst}) cannot exceed "
                f"amount_incl_gst ({amount_incl_gst})",
                amount_gst,
                ErrorCode.INVALID_AMOUNT,
            )
            return

        amount_incl_gst = round_currency(amount_incl_gst)
        amount_gst = round_currency(amount_gst)
        fields["amount_incl_gst"] = amount_incl_gst
        fields["amount_gst"] = amount_gst
        fields["amount_excl_gst"] = amount_incl_gst - amount_gst

    def _validate_business(
        self, data: Dict[str, Any], fields: Dict[str, Any], report: ValidationReport
    ) -> None:
        payee = FieldValidators.require_string(data.get("payee"), "payee", report)
        if payee is not None:
            fields["payee"] = payee
        for name in ("business_expense_type", "category"):
            if data.get(name) is not None:
                fields[name] = data[name]
        self._validate_entered_amounts(data, fields, report)

    def _validate_reclaimable(
        self, data: Dict[str, Any], fields: Dict[str, Any], report: ValidationReport
    ) -> None:
        contact_id = FieldValidators.require_string(
            data.get("contact_id"), "contact_id", report
        )
        if contact_id is not None:
            fields["contact_id"] = contact_id
        payee = FieldValidators.require_string(data.get("payee"), "payee", report)
        if payee is not None:
            fields["payee"] = payee
        self._validate_entered_amounts(data, fields, report)

    def _validate_kilometre(
        self, data: Dict[str, Any], fields: Dict[str, Any], report: ValidationReport
    ) -> None:
        contact_id = FieldValidators.require_string(
            data.get("contact_id"), "contact_id", report
        )
        rate = FieldValidators.parse_amount(
            data.get("km_rate_amount_excl_gst"), "km_rate_amount_excl_gst", report
        )
        kms = FieldValidators.parse_whole_number(
            data.get("kms"), "kms", report, min_val=1
        )
        is_gst_free = FieldValidators.require_flag(
            data.get("is_gst_free"), "is_gst_free", report
        )
        if contact_id is None or rate is None or kms is None or is_gst_free is None:
            return

        # Supplied amount fields are never trusted for kilometre expenses
        amounts = calculate_kilometre_amounts(rate, kms, is_gst_free, self.gst_rate)
        fields.update(
            contact_id=contact_id,
            km_rate_amount_excl_gst=rate,
            kms=kms,
            is_gst_free=is_gst_free,
            amount_excl_gst=amounts.amount_excl_gst,
            amount_gst=amounts.amount_gst,
            amount_incl_gst=amounts.amount_incl_gst,
        )
        if data.get("payee") is not None:
            fields["payee"] = data["payee"]
