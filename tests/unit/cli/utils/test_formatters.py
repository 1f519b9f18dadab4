"""Unit tests for CLI formatters."""

from decimal import Decimal

import pandas as pd

from careledger.cli.utils.formatters import (
    MAX_ISSUES_SHOWN,
    format_dataframe,
    format_error,
    format_info,
    format_money,
    format_report,
    format_success,
    format_table,
    format_warning,
)
from careledger.errors import ErrorCode
from careledger.validators.validation_report import ValidationReport


class TestMessageFormatters:
    """Test styled message helpers."""

    def test_symbols(self):
        """Test each message type has its symbol."""
        assert "✓ done" in format_success("done")
        assert "✗ failed" in format_error("failed")
        assert "⚠ careful" in format_warning("careful")
        assert "ℹ note" in format_info("note")


class TestFormatMoney:
    """Test money formatting."""

    def test_thousands_separator(self):
        """Test large amounts get separators and two places."""
        assert format_money(Decimal("1234.5")) == "$1,234.50"

    def test_negative(self):
        """Test negative balances keep their sign."""
        assert format_money(Decimal("-50")) == "-$50.00"

    def test_float(self):
        """Test floats from report frames are formatted exactly."""
        assert format_money(0.1) == "$0.10"


class TestFormatTable:
    """Test table formatting."""

    def test_basic_table(self):
        """Test headers and rows are aligned."""
        table = format_table(["Invoice", "Status"], [["INV-0001", "Paid"]])

        lines = table.split("\n")
        assert lines[0] == "+----------+--------+"
        assert lines[1] == "| Invoice  | Status |"
        assert lines[3] == "| INV-0001 | Paid   |"

    def test_empty_headers(self):
        """Test no headers gives an empty string."""
        assert format_table([], []) == ""

    def test_no_rows(self):
        """Test a table without rows has only the header."""
        assert len(format_table(["A"], []).split("\n")) == 3


class TestFormatDataframe:
    """Test DataFrame rendering."""

    def test_money_columns(self):
        """Test money columns are rendered as dollars."""
        df = pd.DataFrame([{"Code": "INV-0001", "Outstanding": 200.0}])

        table = format_dataframe(df, ["Outstanding"])

        assert "$200.00" in table
        assert "INV-0001" in table


class TestFormatReport:
    """Test report rendering."""

    def test_errors_then_warnings(self):
        """Test errors are listed before warnings with their codes."""
        report = ValidationReport()
        report.add_warning("id", "Receipt replaced", "r1")
        report.add_error("kms", "kms is required", None, ErrorCode.MISSING_FIELD)

        lines = format_report(report)

        assert "kms: kms is required [MissingField]" in lines[0]
        assert "id: Receipt replaced" in lines[1]

    def test_truncates_long_reports(self):
        """Test only the first issues of each severity are listed."""
        report = ValidationReport()
        for i in range(MAX_ISSUES_SHOWN + 5):
            report.add_error(f"line{i}", "bad", None, ErrorCode.INVALID_AMOUNT)

        lines = format_report(report)

        assert len(lines) == MAX_ISSUES_SHOWN + 1
        assert lines[-1] == "  ... and 5 more"
