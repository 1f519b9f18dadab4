"""Unit tests for CLI error handling."""

import click
import pytest
from pydantic import ValidationError

from careledger.cli.error_handlers import (
    ConfigurationError,
    DataValidationError,
    InputFileError,
    handle_cli_error,
    with_error_handling,
)
from careledger.errors import BillingValidationError, ErrorCode, InvalidAmountError
from careledger.models import Invoice
from careledger.validators.validation_report import ValidationReport


class TestHandleCliError:
    """Test exit codes and messages per error type."""

    @pytest.mark.parametrize(
        "error,code",
        [
            (ConfigurationError("bad"), 1),
            (InputFileError("missing"), 2),
            (DataValidationError("invalid"), 3),
            (InvalidAmountError("negative"), 4),
            (click.Abort(), 130),
            (RuntimeError("boom"), 255),
        ],
    )
    def test_exit_codes(self, error, code):
        """Test each error type maps to its exit code."""
        assert handle_cli_error(error) == code

    def test_recovery_hint_shown(self, capsys):
        """Test recovery hints are printed."""
        handle_cli_error(InputFileError("File not found", recovery_hint="Check the path"))

        assert "Hint: Check the path" in capsys.readouterr().out

    def test_billing_error_shows_code(self, capsys):
        """Test billing errors print their error code."""
        handle_cli_error(InvalidAmountError("amount cannot be negative"))

        assert "[InvalidAmount]" in capsys.readouterr().out

    def test_billing_validation_error_lists_issues(self, capsys):
        """Test report issues are listed."""
        report = ValidationReport()
        report.add_error("receipt_id", "Unknown receipt", "r9", ErrorCode.MISSING_FIELD)

        assert handle_cli_error(BillingValidationError(report)) == 4
        assert "receipt_id: Unknown receipt [MissingField]" in capsys.readouterr().out

    def test_pydantic_error_is_data_error(self, capsys):
        """Test model validation errors exit with 3 and list locations."""
        with pytest.raises(ValidationError) as exc_info:
            Invoice.model_validate({"id": "inv-1"})

        assert handle_cli_error(exc_info.value) == 3
        assert "contact_id" in capsys.readouterr().out

    def test_unexpected_error_debug_trace(self, capsys):
        """Test debug mode prints the stack trace."""
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_cli_error(e, debug=True)

        assert "Full stack trace" in capsys.readouterr().out


class TestWithErrorHandling:
    """Test the error handling context manager."""

    def test_exits_with_code(self):
        """Test errors become SystemExit with the mapped code."""
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise InputFileError("missing")

        assert exc_info.value.code == 2

    def test_no_error_passes_through(self):
        """Test a clean block does not exit."""
        with with_error_handling():
            value = 1

        assert value == 1
