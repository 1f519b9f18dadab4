"""Data models for the billing core.

This package contains Pydantic models for all business entities:
- BaseDataModel: Base class with common configuration
- Shift: A scheduled block of support work
- Expense: Business, Reclaimable or Kilometre expense
- BillableLine: A single invoiceable amount
- InvoiceDraft / Invoice: Frozen line sets with derived balances
- Receipt: Payment or write-off against an invoice
- ShiftPage / ShiftTimelineWindow: Paged shift timeline
"""

from careledger.models.base import BaseDataModel, to_decimal, to_money
from careledger.models.expense import BusinessExpenseType, Expense, ExpenseType
from careledger.models.invoice import (
    BillableLine,
    Invoice,
    InvoiceDraft,
    InvoiceStatus,
    LineSourceType,
    PaymentMethod,
    Receipt,
    ReceiptType,
)
from careledger.models.shift import RateType, Shift, ShiftStatus
from careledger.models.timeline import (
    ShiftPage,
    ShiftTimelineWindow,
    TimelineDirection,
)

__all__ = [
    "BaseDataModel",
    "to_decimal",
    "to_money",
    "BillableLine",
    "BusinessExpenseType",
    "Expense",
    "ExpenseType",
    "Invoice",
    "InvoiceDraft",
    "InvoiceStatus",
    "LineSourceType",
    "PaymentMethod",
    "RateType",
    "Receipt",
    "ReceiptType",
    "Shift",
    "ShiftStatus",
    "ShiftPage",
    "ShiftTimelineWindow",
    "TimelineDirection",
]
