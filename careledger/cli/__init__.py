"""CareLedger CLI.

This module provides a command-line interface over the billing core.
It includes commands for GST and kilometre calculations, expense
validation, invoice status and the invoice register.
"""

import click

from careledger import __version__
from careledger.cli.commands.calculate import gst, kilometres
from careledger.cli.commands.expenses import validate_expenses
from careledger.cli.commands.invoices import invoice_status, register
from careledger.config.logging_config import LoggingConfig, configure_logging


@click.group(help="CareLedger CLI - GST, expenses, invoice status and reports")
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(sorted(LoggingConfig.VALID_LEVELS), case_sensitive=False),
    default="WARNING",
    help="Logging level for billing core messages (default: WARNING)",
)
def cli(log_level: str):
    """CareLedger CLI main entry point."""
    configure_logging(LoggingConfig(log_level=log_level))


# Register commands
cli.add_command(gst)
cli.add_command(kilometres)
cli.add_command(validate_expenses)
cli.add_command(invoice_status)
cli.add_command(register)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
