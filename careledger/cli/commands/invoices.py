"""Invoice status and register commands."""

import datetime as dt
from typing import Optional

import click

from careledger.aggregators.invoice_aggregator import InvoiceAggregator
from careledger.calculators.fiscal_period import DateRange, current_fiscal_year
from careledger.cli.error_handlers import DataValidationError, with_error_handling
from careledger.cli.utils.formatters import (
    format_dataframe,
    format_info,
    format_money,
    format_success,
    format_table,
    format_warning,
)
from careledger.cli.utils.loaders import (
    load_expenses,
    load_invoices,
    load_settings,
    resolve_today,
)
from careledger.ledger.status_resolver import days_overdue, effective_status
from careledger.models.invoice import InvoiceStatus
from careledger.writers.ledger_report_generator import LedgerReportGenerator

DATE_FORMAT = ["%Y-%m-%d"]

MONEY_COLUMNS = [
    "Total excl GST",
    "GST",
    "Total incl GST",
    "Paid",
    "Written Off",
    "Outstanding",
    "Total",
    "Excl GST",
    "Incl GST",
]


@click.command(name="invoice-status")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option(
    "--today",
    type=click.DateTime(formats=DATE_FORMAT),
    default=None,
    help="Resolve status as of this day (default: today in DEFAULT_TIMEZONE)",
)
@click.option(
    "--status",
    type=click.Choice([s.value for s in InvoiceStatus], case_sensitive=False),
    default=None,
    help="Only show invoices with this status",
)
@click.option("--contact", type=str, default=None, help="Only show this contact")
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def invoice_status(
    file: str,
    today: Optional[dt.datetime],
    status: Optional[str],
    contact: Optional[str],
    debug: bool,
):
    """Show the effective status and balance of the invoices in FILE.

    Example:
        careledger invoice-status invoices.json
        careledger invoice-status invoices.json --status Overdue --today 2024-04-01
    """
    with with_error_handling(debug):
        settings = load_settings()
        day = resolve_today(today, settings)
        invoices = load_invoices(file)

        wanted = None
        if status:
            wanted = next(s for s in InvoiceStatus if s.value.lower() == status.lower())
        selected = InvoiceAggregator().filter_invoices(
            invoices, day, status=wanted, contact_id=contact
        )

        click.echo(format_info(f"{len(selected)} invoice(s) as of {day}"))
        rows = []
        for invoice in selected:
            rows.append(
                [
                    invoice.code or invoice.id,
                    invoice.contact_id,
                    invoice.due_date.isoformat(),
                    format_money(invoice.total_incl_gst),
                    format_money(invoice.outstanding_incl_gst),
                    effective_status(invoice, day).value,
                    days_overdue(invoice, day),
                ]
            )
            if invoice.is_over_allocated:
                click.echo(
                    format_warning(
                        f"{invoice.code or invoice.id} is over-allocated by "
                        f"{format_money(-invoice.outstanding_incl_gst)}"
                    )
                )

        click.echo(
            format_table(
                [
                    "Invoice",
                    "Contact",
                    "Due",
                    "Total",
                    "Outstanding",
                    "Status",
                    "Days Overdue",
                ],
                rows,
            )
        )


@click.command(name="register")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option(
    "--today",
    type=click.DateTime(formats=DATE_FORMAT),
    default=None,
    help="Resolve status as of this day (default: today in DEFAULT_TIMEZONE)",
)
@click.option(
    "--from",
    "date_from",
    type=click.DateTime(formats=DATE_FORMAT),
    default=None,
    help="Start of the GST period (default: start of the current fiscal year)",
)
@click.option(
    "--to",
    "date_to",
    type=click.DateTime(formats=DATE_FORMAT),
    default=None,
    help="End of the GST period (default: end of the current fiscal year)",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Also write the invoice register to this CSV file",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def register(
    file: str,
    today: Optional[dt.datetime],
    date_from: Optional[dt.datetime],
    date_to: Optional[dt.datetime],
    csv_path: Optional[str],
    debug: bool,
):
    """Print the invoice register and GST summary for FILE.

    FILE holds a JSON list of invoices, or an object with 'invoices' and
    'expenses' keys. The GST period defaults to the fiscal year holding
    --today.

    Example:
        careledger register ledger.json
        careledger register ledger.json --from 2024-01-01 --to 2024-03-31
    """
    with with_error_handling(debug):
        settings = load_settings()
        day = resolve_today(today, settings)
        invoices = load_invoices(file)
        expenses = load_expenses(file)

        fiscal_year = current_fiscal_year(
            day, settings.fy_start_month, settings.fy_start_day
        )
        start = date_from.date() if date_from else fiscal_year.start
        end = date_to.date() if date_to else fiscal_year.end
        if end < start:
            raise DataValidationError(
                f"--to ({end}) cannot be before --from ({start})",
                recovery_hint="Swap the two dates",
            )
        period = DateRange(start=start, end=end)

        data = LedgerReportGenerator(invoices, expenses, day).generate(period)

        click.echo(format_info(f"Invoice register as of {day}"))
        click.echo(format_dataframe(data.invoice_register, MONEY_COLUMNS))
        click.echo()
        click.echo(format_dataframe(data.invoice_summary, MONEY_COLUMNS))
        click.echo()
        click.echo(format_info(f"GST summary {period.start} to {period.end}"))
        click.echo(format_dataframe(data.gst_summary, MONEY_COLUMNS))

        if csv_path:
            data.invoice_register.to_csv(csv_path, index=False)
            click.echo(format_success(f"Register written to {csv_path}"))
