"""Services connecting the billing core to the surrounding application."""

from careledger.services.billing_service import BillingService
from careledger.services.interfaces import (
    BillabilityChecker,
    InvoiceRepository,
    OrganizationContext,
    ShiftPageFetcher,
)

__all__ = [
    "BillabilityChecker",
    "BillingService",
    "InvoiceRepository",
    "OrganizationContext",
    "ShiftPageFetcher",
]
