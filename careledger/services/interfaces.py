"""Collaborators the billing core depends on.

These are implemented by the surrounding application (API clients,
databases, session state). The core only calls them through
``BillingService`` and ``ShiftTimeline``; any I/O failure inside them is
theirs to retry or surface.
"""

import datetime as dt
from typing import Optional, Protocol

from careledger.models.invoice import Invoice, InvoiceDraft, Receipt
from careledger.models.timeline import ShiftPage, TimelineDirection


class BillabilityChecker(Protocol):
    """Answers whether a shift or expense is free to attach to an invoice."""

    def is_billable(self, item_id: str) -> bool: ...


class ShiftPageFetcher(Protocol):
    """Fetches one page of shifts strictly before or after a cursor."""

    async def fetch_shifts_page(
        self,
        contact_id: Optional[str],
        direction: TimelineDirection,
        cursor: dt.datetime,
        page_size: int,
    ) -> ShiftPage: ...


class InvoiceRepository(Protocol):
    """Stores invoices and their receipts."""

    def persist_invoice(self, draft: InvoiceDraft) -> Invoice: ...

    def persist_receipt(self, invoice_id: str, receipt: Receipt) -> None: ...

    def delete_receipt(self, receipt_id: str) -> None: ...


class OrganizationContext(Protocol):
    """Supplies the current organization's settings."""

    def current_organization_timezone(self) -> str: ...
