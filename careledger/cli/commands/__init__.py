"""CLI commands."""

from careledger.cli.commands.calculate import gst, kilometres
from careledger.cli.commands.expenses import validate_expenses
from careledger.cli.commands.invoices import invoice_status, register

__all__ = ["gst", "invoice_status", "kilometres", "register", "validate_expenses"]
