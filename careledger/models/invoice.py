"""Invoice, billable line and receipt models for the billing core.

An invoice freezes a set of billable lines (from completed shifts and
contact-billable expenses) and accumulates receipts: payments and
write-offs. Every balance on the invoice is derived from those two lists
by full resummation; nothing is stored or adjusted incrementally.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import (
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from careledger.models.base import BaseDataModel, to_money


class LineSourceType(str, Enum):
    """What a billable line was created from."""

    SHIFT = "Shift"
    EXPENSE = "Expense"


class ReceiptType(str, Enum):
    """Kind of ledger entry recorded against an invoice."""

    PAYMENT = "Payment"
    WRITE_OFF = "WriteOff"


class PaymentMethod(str, Enum):
    """How a payment was received."""

    EFT = "EFT"
    CASH = "Cash"
    OTHER = "Other"


class InvoiceStatus(str, Enum):
    """Effective invoice status, derived on read."""

    UNPAID = "Unpaid"
    PAID = "Paid"
    OVERDUE = "Overdue"
    WRITTEN_OFF = "Written Off"


def _sum(values) -> Decimal:
    return sum(values, Decimal("0.00"))


class BillableLine(BaseDataModel):
    """A single invoiceable amount.

    Attributes:
        id: Line identifier
        source_type: Shift or Expense
        source_id: Identifier of the shift or expense the line came from
        description: Line description
        date: Date of the underlying work or expense
        amount_excl_gst: Amount excluding GST
        amount_gst: GST component
        amount_incl_gst: Amount including GST
    """

    id: str = Field(..., min_length=1, description="Line identifier")
    source_type: LineSourceType = Field(..., description="Shift or Expense")
    source_id: str = Field(..., min_length=1, description="Source identifier")
    description: str = Field("", description="Line description")
    date: dt.date = Field(..., description="Line date")
    amount_excl_gst: Decimal = Field(..., description="Amount excluding GST")
    amount_gst: Decimal = Field(..., ge=0, description="GST component")
    amount_incl_gst: Decimal = Field(..., description="Amount including GST")

    @field_validator(
        "amount_excl_gst", "amount_gst", "amount_incl_gst", mode="before"
    )
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert numeric values to 2-place Decimals for precision."""
        return to_money(v)

    @model_validator(mode="after")
    def validate_amounts_balance(self) -> "BillableLine":
        """Validate amount_incl_gst == amount_excl_gst + amount_gst."""
        if self.amount_excl_gst + self.amount_gst != self.amount_incl_gst:
            raise ValueError(
                f"Line {self.id}: amount_incl_gst ({self.amount_incl_gst}) must "
                f"equal amount_excl_gst + amount_gst "
                f"({self.amount_excl_gst} + {self.amount_gst})"
            )
        return self


class Receipt(BaseDataModel):
    """A payment or write-off recorded against an invoice.

    Only the GST-inclusive amount is entered; when the exclusive and GST
    parts are not supplied they are split out at the standard GST rate.
    The ledger re-splits a recorded receipt in proportion to its
    invoice's GST.
    The sign of the amount is checked by the ledger, not here, so that a
    bad receipt surfaces as a typed ledger error.

    Attributes:
        id: Receipt identifier
        invoice_id: Invoice the receipt belongs to
        receipt_type: Payment or WriteOff
        date: Date received or written off
        amount_incl_gst: Amount including GST
        amount_excl_gst: Amount excluding GST
        amount_gst: GST component
        payment_method: EFT, Cash or Other (payments only)
        other_payment_method: Free-text method when payment_method is Other
        notes: Optional notes
    """

    id: str = Field(..., min_length=1, description="Receipt identifier")
    invoice_id: str = Field(..., min_length=1, description="Invoice identifier")
    receipt_type: ReceiptType = Field(..., description="Payment or WriteOff")
    date: dt.date = Field(..., description="Receipt date")
    amount_incl_gst: Decimal = Field(..., description="Amount including GST")
    amount_excl_gst: Decimal = Field(..., description="Amount excluding GST")
    amount_gst: Decimal = Field(..., description="GST component")
    payment_method: Optional[PaymentMethod] = Field(None, description="Method")
    other_payment_method: Optional[str] = Field(None, description="Other method")
    notes: Optional[str] = Field(None, description="Notes")

    @model_validator(mode="before")
    @classmethod
    def derive_gst_split(cls, data: Any) -> Any:
        """Fill amount_excl_gst/amount_gst from amount_incl_gst if absent."""
        if not isinstance(data, dict):
            return data
        if data.get("amount_incl_gst") is None:
            return data
        if data.get("amount_excl_gst") is None and data.get("amount_gst") is None:
            from careledger.calculators.gst_calculator import split_gst_inclusive

            split = split_gst_inclusive(to_money(data["amount_incl_gst"]))
            data = {
                **data,
                "amount_excl_gst": split.amount_excl_gst,
                "amount_gst": split.amount_gst,
            }
        return data

    @field_validator(
        "amount_excl_gst", "amount_gst", "amount_incl_gst", mode="before"
    )
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert numeric values to 2-place Decimals for precision."""
        return to_money(v)


class InvoiceDraft(BaseDataModel):
    """An invoice that has been built but not yet persisted.

    Attributes:
        contact_id: Contact being invoiced
        date: Invoice date
        due_date: Payment due date
        lines: Billable lines, shifts first then expenses
        notes: Optional notes
    """

    contact_id: str = Field(..., min_length=1, description="Contact identifier")
    date: dt.date = Field(..., description="Invoice date")
    due_date: dt.date = Field(..., description="Due date")
    lines: List[BillableLine] = Field(..., min_length=1, description="Lines")
    notes: Optional[str] = Field(None, description="Notes")

    @computed_field  # type: ignore[misc]
    @property
    def total_excl_gst(self) -> Decimal:
        """Sum of line amounts excluding GST."""
        return _sum(line.amount_excl_gst for line in self.lines)

    @computed_field  # type: ignore[misc]
    @property
    def total_gst(self) -> Decimal:
        """Sum of line GST components."""
        return _sum(line.amount_gst for line in self.lines)

    @computed_field  # type: ignore[misc]
    @property
    def total_incl_gst(self) -> Decimal:
        """Sum of line amounts including GST."""
        return _sum(line.amount_incl_gst for line in self.lines)

    @property
    def shift_ids(self) -> List[str]:
        """Source ids of the shift lines, in line order."""
        return [
            line.source_id
            for line in self.lines
            if line.source_type == LineSourceType.SHIFT
        ]

    @property
    def expense_ids(self) -> List[str]:
        """Source ids of the expense lines, in line order."""
        return [
            line.source_id
            for line in self.lines
            if line.source_type == LineSourceType.EXPENSE
        ]


class Invoice(InvoiceDraft):
    """A persisted invoice with its receipts and derived balances.

    All totals and balances are computed properties; they are dumped by
    ``model_dump`` and ignored when an invoice is loaded back.

    Attributes:
        id: Invoice identifier
        code: Human-facing invoice number
        receipts: Payments and write-offs, in the order they were recorded
        is_written_off: Whether the invoice was explicitly written off

    Example:
        >>> invoice = Invoice(
        ...     id="inv-1", code="INV-0001", contact_id="c1",
        ...     date=dt.date(2024, 3, 1), due_date=dt.date(2024, 3, 15),
        ...     lines=[line],
        ... )
        >>> invoice.outstanding_incl_gst == invoice.total_incl_gst
        True
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Invoice identifier")
    code: str = Field("", description="Invoice number")
    receipts: List[Receipt] = Field(default_factory=list, description="Receipts")
    is_written_off: bool = Field(False, description="Explicit write-off flag")

    @model_validator(mode="after")
    def validate_invoice(self) -> "Invoice":
        """Validate date order and uniqueness of line and receipt ids.

        Raises:
            ValueError: If due_date precedes date or ids repeat
        """
        if self.due_date < self.date:
            raise ValueError(
                f"due_date ({self.due_date}) cannot be before date ({self.date})"
            )
        line_ids = [line.id for line in self.lines]
        if len(set(line_ids)) != len(line_ids):
            raise ValueError("Invoice line ids must be unique")
        receipt_ids = [receipt.id for receipt in self.receipts]
        if len(set(receipt_ids)) != len(receipt_ids):
            raise ValueError("Receipt ids must be unique")
        return self

    def _receipts_of(self, receipt_type: ReceiptType) -> List[Receipt]:
        return [r for r in self.receipts if r.receipt_type == receipt_type]

    @computed_field  # type: ignore[misc]
    @property
    def paid_excl_gst(self) -> Decimal:
        """Sum of payments excluding GST."""
        return _sum(r.amount_excl_gst for r in self._receipts_of(ReceiptType.PAYMENT))

    @computed_field  # type: ignore[misc]
    @property
    def paid_incl_gst(self) -> Decimal:
        """Sum of payments including GST."""
        return _sum(r.amount_incl_gst for r in self._receipts_of(ReceiptType.PAYMENT))

    @computed_field  # type: ignore[misc]
    @property
    def written_off_excl_gst(self) -> Decimal:
        """Sum of write-offs excluding GST."""
        return _sum(
            r.amount_excl_gst for r in self._receipts_of(ReceiptType.WRITE_OFF)
        )

    @computed_field  # type: ignore[misc]
    @property
    def written_off_incl_gst(self) -> Decimal:
        """Sum of write-offs including GST."""
        return _sum(
            r.amount_incl_gst for r in self._receipts_of(ReceiptType.WRITE_OFF)
        )

    @computed_field  # type: ignore[misc]
    @property
    def outstanding_excl_gst(self) -> Decimal:
        """Raw outstanding balance excluding GST (may be negative)."""
        return self.total_excl_gst - self.paid_excl_gst - self.written_off_excl_gst

    @computed_field  # type: ignore[misc]
    @property
    def outstanding_incl_gst(self) -> Decimal:
        """Raw outstanding balance including GST (may be negative)."""
        return self.total_incl_gst - self.paid_incl_gst - self.written_off_incl_gst

    @computed_field  # type: ignore[misc]
    @property
    def display_outstanding_incl_gst(self) -> Decimal:
        """Outstanding balance floored at zero, for display only."""
        return max(self.outstanding_incl_gst, Decimal("0.00"))

    @computed_field  # type: ignore[misc]
    @property
    def is_over_allocated(self) -> bool:
        """True when payments and write-offs exceed the invoice total."""
        return self.outstanding_incl_gst < 0
