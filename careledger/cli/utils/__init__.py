"""CLI utility functions."""

from careledger.cli.utils.formatters import (
    format_dataframe,
    format_error,
    format_info,
    format_money,
    format_report,
    format_success,
    format_table,
    format_warning,
)

__all__ = [
    "format_dataframe",
    "format_error",
    "format_info",
    "format_money",
    "format_report",
    "format_success",
    "format_table",
    "format_warning",
]
