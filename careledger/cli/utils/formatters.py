"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import Any, List, Union

import click
import pandas as pd

from careledger.validators.validation_report import (
    ValidationReport,
    ValidationSeverity,
)

MAX_ISSUES_SHOWN = 20


def format_success(message: str) -> str:
    """Format a success message with green color.

    Args:
        message: The success message to format

    Returns:
        Formatted success message with color
    """
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color.

    Args:
        message: The error message to format

    Returns:
        Formatted error message with color
    """
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color.

    Args:
        message: The warning message to format

    Returns:
        Formatted warning message with color
    """
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color.

    Args:
        message: The info message to format

    Returns:
        Formatted info message with color
    """
    return click.style(f"ℹ {message}", fg="blue")


def format_money(amount: Union[Decimal, float, int]) -> str:
    """Format an amount as dollars with thousands separators.

    Negative amounts (over-allocated balances) keep their sign.

    Example:
        >>> format_money(Decimal("-1234.5"))
        '-$1,234.50'
    """
    value = Decimal(str(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_table(headers: List[str], rows: List[List[Any]], max_width: int = 80) -> str:
    """Format data as a table.

    Args:
        headers: List of column headers
        rows: List of data rows (each row is a list of cell values)
        max_width: Maximum width for each column (default: 80)

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(str(cell)))

    col_widths = [min(w, max_width) for w in col_widths]

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"

    header_row = (
        "|"
        + "|".join(f" {h:<{col_widths[i]}} " for i, h in enumerate(headers))
        + "|"
    )

    data_rows = []
    for row in rows:
        formatted_cells = []
        for i, cell in enumerate(row[: len(col_widths)]):
            cell_str = str(cell)[: col_widths[i]]
            formatted_cells.append(f" {cell_str:<{col_widths[i]}} ")
        data_rows.append("|" + "|".join(formatted_cells) + "|")

    table_lines = [separator, header_row, separator]
    if rows:
        table_lines.extend(data_rows)
        table_lines.append(separator)

    return "\n".join(table_lines)


def format_dataframe(df: pd.DataFrame, money_columns: List[str] = ()) -> str:
    """Format a report DataFrame as a table, rendering money columns.

    Args:
        df: DataFrame to render
        money_columns: Columns holding amounts

    Returns:
        Formatted table as a string
    """
    headers = [str(column) for column in df.columns]
    rows = []
    for record in df.itertuples(index=False):
        rows.append(
            [
                format_money(value) if column in money_columns else value
                for column, value in zip(df.columns, record)
            ]
        )
    return format_table(headers, rows)


def format_report(report: ValidationReport) -> List[str]:
    """Render the issues of a validation report as styled lines.

    At most ``MAX_ISSUES_SHOWN`` issues are listed per severity.

    Args:
        report: Report to render

    Returns:
        Lines ready for ``click.echo``
    """
    lines = []
    for severity, style in (
        (ValidationSeverity.ERROR, format_error),
        (ValidationSeverity.WARNING, format_warning),
    ):
        issues = [i for i in report.issues if i.severity == severity]
        for issue in issues[:MAX_ISSUES_SHOWN]:
            code = f" [{issue.code.value}]" if issue.code else ""
            lines.append(style(f"  {issue.field}: {issue.message}{code}"))
        if len(issues) > MAX_ISSUES_SHOWN:
            lines.append(f"  ... and {len(issues) - MAX_ISSUES_SHOWN} more")
    return lines
