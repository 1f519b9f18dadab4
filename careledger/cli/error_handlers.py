"""Error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from careledger.cli.utils.formatters import format_error, format_report, format_warning
from careledger.errors import BillingError, BillingValidationError


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    pass


class InputFileError(CLIError):
    """Error reading or parsing an input file."""

    pass


class DataValidationError(CLIError):
    """Error related to data validation."""

    pass


def _echo_hint(error: CLIError) -> None:
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code: 1 configuration, 2 input file, 3 invalid data,
        4 billing rule violation, 130 cancelled, 255 unexpected
    """
    if isinstance(error, ConfigurationError):
        click.echo(format_error(f"Configuration Error: {error.message}"))
        _echo_hint(error)
        return 1

    elif isinstance(error, InputFileError):
        click.echo(format_error(f"Input File Error: {error.message}"))
        _echo_hint(error)
        return 2

    elif isinstance(error, DataValidationError):
        click.echo(format_error(f"Data Validation Error: {error.message}"))
        _echo_hint(error)
        return 3

    elif isinstance(error, ValidationError):
        click.echo(format_error(f"Data Validation Error: {error.title}"))
        for detail in error.errors()[:20]:
            location = ".".join(str(part) for part in detail["loc"])
            click.echo(format_error(f"  {location}: {detail['msg']}"))
        return 3

    elif isinstance(error, BillingValidationError):
        click.echo(format_error(f"Billing Error: {error.message}"))
        for line in format_report(error.report):
            click.echo(line)
        return 4

    elif isinstance(error, BillingError):
        code = f" [{error.code.value}]" if error.code else ""
        click.echo(format_error(f"Billing Error{code}: {error.message}"))
        return 4

    # Handle click.Abort (user cancellation)
    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(traceback.format_exc())
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager that exits with ``handle_cli_error``'s code

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and not isinstance(exc_val, SystemExit):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False  # Don't suppress exceptions

    return ErrorHandler(debug)
