"""Loading settings and JSON input files for CLI commands."""

import datetime as dt
import json
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from careledger.cli.error_handlers import ConfigurationError, InputFileError
from careledger.config.settings import CareLedgerConfig, get_config
from careledger.models.expense import Expense
from careledger.models.invoice import Invoice
from careledger.timeline.grouping import today_in_timezone


def load_settings() -> CareLedgerConfig:
    """Load settings, turning invalid values into a ConfigurationError."""
    try:
        return get_config()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings: {e.error_count()} problem(s)\n{e}",
            recovery_hint="Check the GST_RATE, DEFAULT_TIMEZONE and FY_START_* "
            "values in your environment or .env file",
        )


def resolve_today(
    today: Optional[dt.datetime], settings: CareLedgerConfig
) -> dt.date:
    """The --today option as a date, or today in the organization's zone."""
    if today is not None:
        return today.date()
    return today_in_timezone(settings.default_timezone)


def read_json(path: str) -> Any:
    """Read a JSON file.

    Raises:
        InputFileError: If the file is missing or not valid JSON
    """
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise InputFileError(f"File not found: {path}")
    except json.JSONDecodeError as e:
        raise InputFileError(
            f"{path} is not valid JSON: {e}",
            recovery_hint="Export invoices as a JSON list or an object with "
            "'invoices' and 'expenses' keys",
        )


def _records(data: Any, key: str, path: str) -> List[Any]:
    if isinstance(data, dict):
        return data.get(key, [])
    if isinstance(data, list):
        return data if key == "invoices" else []
    raise InputFileError(f"{path} must hold a JSON list or object")


def load_invoices(path: str) -> List[Invoice]:
    """Load invoices from a JSON list or the 'invoices' key of an object."""
    data = read_json(path)
    records = _records(data, "invoices", path)
    return [Invoice.model_validate(record) for record in records]


def load_expenses(path: str) -> List[Expense]:
    """Load stored expenses from the 'expenses' key of a JSON object."""
    data = read_json(path)
    records = _records(data, "expenses", path)
    return [Expense.model_validate(record) for record in records]
