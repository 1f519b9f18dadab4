"""Effective invoice status.

Status is never stored. It is derived from the invoice's ledger and the
caller's notion of "today" every time it is read, so an unpaid invoice
becomes overdue the day after its due date without any background job.

Precedence, highest first:
1. Written Off - the invoice carries the explicit write-off flag
2. Paid - nothing outstanding and at least one payment received
3. Overdue - outstanding and the due date has passed
4. Unpaid
"""

import datetime as dt
from decimal import Decimal

from careledger.models.invoice import Invoice, InvoiceStatus

ZERO = Decimal("0.00")


def _as_day(value: dt.date) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def effective_status(invoice: Invoice, today: dt.date) -> InvoiceStatus:
    """Resolve the status of an invoice as of ``today``.

    Both the due date and ``today`` are compared at day precision; the
    invoice's own dates are never timezone-converted.

    Args:
        invoice: Invoice to resolve
        today: Reference day (a datetime is truncated to its date)

    Returns:
        The effective InvoiceStatus

    Example:
        >>> effective_status(invoice, dt.date(2024, 4, 1))
        <InvoiceStatus.OVERDUE: 'Overdue'>
    """
    if invoice.is_written_off:
        return InvoiceStatus.WRITTEN_OFF

    outstanding = invoice.outstanding_incl_gst
    if outstanding <= ZERO and invoice.paid_incl_gst > ZERO:
        return InvoiceStatus.PAID

    if outstanding > ZERO and invoice.due_date < _as_day(today):
        return InvoiceStatus.OVERDUE

    return InvoiceStatus.UNPAID


def is_overdue(invoice: Invoice, today: dt.date) -> bool:
    """Whether the invoice resolves to Overdue as of ``today``."""
    return effective_status(invoice, today) == InvoiceStatus.OVERDUE


def days_overdue(invoice: Invoice, today: dt.date) -> int:
    """Days past the due date for an overdue invoice, else 0."""
    if not is_overdue(invoice, today):
        return 0
    return (_as_day(today) - invoice.due_date).days
