"""Unit tests for the validate-expenses command."""

import json

import pytest
from click.testing import CliRunner

from careledger.cli.commands.expenses import validate_expenses

KILOMETRE = {
    "id": "e1",
    "expenseType": "Kilometre",
    "idContact": "c1",
    "kmRateAmountExclGst": "0.85",
    "kms": 120,
    "isGstFree": False,
}
BUSINESS = {
    "id": "e3",
    "expense_type": "Business",
    "payee": "Officeworks",
    "amount_incl_gst": "110.00",
    "amount_gst": "10.00",
}


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def write_json(tmp_path):
    """Write data to a JSON file and return its path."""

    def _write(data, name="expenses.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)

    return _write


class TestValidateExpensesCommand:
    """Test suite for validate-expenses."""

    def test_all_valid(self, runner, mock_env, write_json):
        """Test valid expenses print their derived amounts."""
        result = runner.invoke(validate_expenses, [write_json([KILOMETRE, BUSINESS])])

        assert result.exit_code == 0
        assert "Validating 2 expense(s)" in result.output
        assert "$112.20" in result.output
        assert "All expenses are valid" in result.output

    def test_single_object(self, runner, mock_env, write_json):
        """Test a single expense object is accepted."""
        result = runner.invoke(validate_expenses, [write_json(BUSINESS)])

        assert result.exit_code == 0

    def test_invalid_expense(self, runner, mock_env, write_json):
        """Test invalid expenses are listed and exit with 3."""
        broken = {**BUSINESS, "payee": ""}

        result = runner.invoke(validate_expenses, [write_json([KILOMETRE, broken])])

        assert result.exit_code == 3
        assert "Expense e3:" in result.output
        assert "payee: payee is required [MissingField]" in result.output
        assert "1 of 2 expense(s) are invalid" in result.output

    def test_non_object_entry(self, runner, mock_env, write_json):
        """Test entries that are not objects are rejected."""
        result = runner.invoke(validate_expenses, [write_json([1])])

        assert result.exit_code == 3
        assert "not a JSON object" in result.output

    def test_missing_file(self, runner, mock_env, tmp_path):
        """Test a missing file exits with 2."""
        result = runner.invoke(validate_expenses, [str(tmp_path / "nope.json")])

        assert result.exit_code == 2
        assert "File not found" in result.output

    def test_invalid_json(self, runner, mock_env, tmp_path):
        """Test malformed JSON exits with 2."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        result = runner.invoke(validate_expenses, [str(path)])

        assert result.exit_code == 2
        assert "not valid JSON" in result.output
