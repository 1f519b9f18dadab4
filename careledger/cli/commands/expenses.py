"""Validate expenses command."""

import click

from careledger.cli.error_handlers import DataValidationError, with_error_handling
from careledger.cli.utils.formatters import (
    format_info,
    format_money,
    format_report,
    format_success,
    format_table,
)
from careledger.cli.utils.loaders import load_settings, read_json
from careledger.validators.expense_classifier import ExpenseClassifier


@click.command(name="validate-expenses")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def validate_expenses(file: str, debug: bool):
    """Validate raw expenses in FILE and show their derived amounts.

    FILE holds a JSON list of expenses as entered (snake_case or
    camelCase keys). Kilometre amounts are always recalculated.

    Returns non-zero exit code if any expense is invalid.

    Example:
        careledger validate-expenses expenses.json
    """
    with with_error_handling(debug):
        settings = load_settings()
        raw_expenses = read_json(file)
        if not isinstance(raw_expenses, list):
            raw_expenses = [raw_expenses]

        classifier = ExpenseClassifier(settings.gst_rate)
        click.echo(format_info(f"Validating {len(raw_expenses)} expense(s)..."))

        rows = []
        invalid = 0
        for index, raw in enumerate(raw_expenses, start=1):
            if not isinstance(raw, dict):
                raise DataValidationError(
                    f"Expense #{index} is not a JSON object",
                    recovery_hint="FILE must hold a list of expense objects",
                )
            result = classifier.validate(raw)
            label = raw.get("id") or f"#{index}"
            if not result.is_valid():
                invalid += 1
                click.echo(f"Expense {label}:")
                for line in format_report(result.report):
                    click.echo(line)
                continue
            expense = result.unwrap()
            rows.append(
                [
                    label,
                    expense.expense_type.value,
                    format_money(expense.amount_excl_gst),
                    format_money(expense.amount_gst),
                    format_money(expense.amount_incl_gst),
                ]
            )

        if rows:
            click.echo(
                format_table(["Expense", "Type", "Excl GST", "GST", "Incl GST"], rows)
            )

        if invalid:
            raise DataValidationError(
                f"{invalid} of {len(raw_expenses)} expense(s) are invalid"
            )
        click.echo(format_success("All expenses are valid"))
