"""Unit tests for the expense classifier."""

from decimal import Decimal

import pytest

from careledger.errors import ErrorCode
from careledger.models import ExpenseType
from careledger.validators.expense_classifier import ExpenseClassifier, normalize_keys


@pytest.fixture
def classifier():
    """Classifier at the standard GST rate."""
    return ExpenseClassifier()


class TestNormalizeKeys:
    """Test input key normalization."""

    def test_camel_case_keys(self):
        """Test camelCase keys become snake_case."""
        assert normalize_keys({"amountInclGst": 1, "kmRateAmountExclGst": 2}) == {
            "amount_incl_gst": 1,
            "km_rate_amount_excl_gst": 2,
        }

    def test_id_aliases(self):
        """Test idContact style keys map to contact_id."""
        assert normalize_keys({"idContact": "c1", "idShift": "s1"}) == {
            "contact_id": "c1",
            "shift_id": "s1",
        }


class TestBusinessExpenses:
    """Test Business expense validation."""

    def test_valid_business_expense(self, classifier):
        """Test 110.00 with 10.00 GST is valid and derives 100.00 excl."""
        result = classifier.validate(
            {
                "expense_type": "Business",
                "payee": "Officeworks",
                "amount_incl_gst": "110.00",
                "amount_gst": "10.00",
                "date": "2024-03-06",
            }
        )

        expense = result.unwrap()
        assert expense.expense_type == ExpenseType.BUSINESS
        assert expense.amount_excl_gst == Decimal("100.00")
        assert expense.date.isoformat() == "2024-03-06"

    def test_gst_exceeding_total_rejected(self, classifier):
        """Test GST larger than the inclusive amount is InvalidAmount."""
        result = classifier.validate(
            {
                "expense_type": "Business",
                "payee": "Officeworks",
                "amount_incl_gst": "10.00",
                "amount_gst": "11.00",
            }
        )

        assert not result.is_valid()
        assert result.report.codes() == [ErrorCode.INVALID_AMOUNT]
        assert result.report.fields() == ["amount_gst"]

    def test_zero_total_rejected(self, classifier):
        """Test the inclusive amount must be greater than zero."""
        result = classifier.validate(
            {
                "expense_type": "Business",
                "payee": "Officeworks",
                "amount_incl_gst": "0",
                "amount_gst": "0",
            }
        )

        assert result.report.fields() == ["amount_incl_gst"]

    def test_all_problems_reported(self, classifier):
        """Test every missing field is reported, not only the first."""
        result = classifier.validate({"expense_type": "Business"})

        assert result.report.fields() == ["payee", "amount_incl_gst", "amount_gst"]

    def test_unknown_business_expense_type(self, classifier):
        """Test a present but unknown business_expense_type is not MissingField."""
        result = classifier.validate(
            {
                "expense_type": "Business",
                "payee": "Officeworks",
                "business_expense_type": "Foo",
                "amount_incl_gst": "110.00",
                "amount_gst": "10.00",
            }
        )

        assert not result.is_valid()
        assert result.report.fields() == ["business_expense_type"]
        assert result.report.codes() == [ErrorCode.INVALID_AMOUNT]


class TestReclaimableExpenses:
    """Test Reclaimable expense validation."""

    def test_valid_reclaimable(self, classifier):
        """Test camelCase input is accepted."""
        result = classifier.validate(
            {
                "expenseType": "Reclaimable",
                "idContact": "c1",
                "payee": "Cinema",
                "amountInclGst": 22,
                "amountGst": 2,
            }
        )

        expense = result.unwrap()
        assert expense.contact_id == "c1"
        assert expense.is_contact_billable

    def test_contact_required(self, classifier):
        """Test reclaimable expenses need a contact."""
        result = classifier.validate(
            {
                "expense_type": "Reclaimable",
                "payee": "Cinema",
                "amount_incl_gst": "22.00",
                "amount_gst": "2.00",
            }
        )

        assert result.report.fields() == ["contact_id"]
        assert result.report.codes() == [ErrorCode.MISSING_FIELD]


class TestKilometreExpenses:
    """Test Kilometre expense validation."""

    def test_amounts_are_derived(self, classifier):
        """Test 120 km at 0.85 gives 102.00 + 10.20 = 112.20."""
        result = classifier.validate(
            {
                "expense_type": "Kilometre",
                "contact_id": "c1",
                "km_rate_amount_excl_gst": "0.85",
                "kms": 120,
                "is_gst_free": False,
            }
        )

        expense = result.unwrap()
        assert expense.amount_excl_gst == Decimal("102.00")
        assert expense.amount_gst == Decimal("10.20")
        assert expense.amount_incl_gst == Decimal("112.20")

    def test_supplied_amounts_are_ignored(self, classifier):
        """Test caller-supplied amounts are replaced by derived ones."""
        result = classifier.validate(
            {
                "expense_type": "Kilometre",
                "contact_id": "c1",
                "km_rate_amount_excl_gst": "0.85",
                "kms": 120,
                "is_gst_free": True,
                "amount_incl_gst": "999.00",
                "amount_gst": "0.00",
            }
        )

        assert result.unwrap().amount_incl_gst == Decimal("102.00")

    def test_gst_flag_required(self, classifier):
        """Test the GST flag has no default."""
        result = classifier.validate(
            {
                "expense_type": "Kilometre",
                "contact_id": "c1",
                "km_rate_amount_excl_gst": "0.85",
                "kms": 120,
            }
        )

        assert result.report.fields() == ["is_gst_free"]

    def test_zero_kms_rejected(self, classifier):
        """Test at least one kilometre is required."""
        result = classifier.validate(
            {
                "expense_type": "Kilometre",
                "contact_id": "c1",
                "km_rate_amount_excl_gst": "0.85",
                "kms": 0,
                "is_gst_free": False,
            }
        )

        assert result.report.fields() == ["kms"]
        assert result.report.codes() == [ErrorCode.INVALID_AMOUNT]

    def test_custom_gst_rate(self):
        """Test derived GST follows the classifier's rate."""
        classifier = ExpenseClassifier(gst_rate=Decimal("0.15"))

        result = classifier.validate(
            {
                "expense_type": "Kilometre",
                "contact_id": "c1",
                "km_rate_amount_excl_gst": "1.00",
                "kms": 100,
                "is_gst_free": False,
            }
        )

        assert result.unwrap().amount_gst == Decimal("15.00")


class TestExpenseType:
    """Test the variant tag."""

    def test_missing_type(self, classifier):
        """Test a missing tag is MissingField."""
        result = classifier.validate({"payee": "x"})

        assert result.report.fields() == ["expense_type"]

    def test_unknown_type(self, classifier):
        """Test an unknown tag lists the allowed values."""
        result = classifier.validate({"expense_type": "Travel"})

        assert "Business, Reclaimable, Kilometre" in result.errors[0].message
