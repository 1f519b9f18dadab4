"""Expense data model for the billing core.

Expenses come in three shapes discriminated by ``expense_type``:

- Business: a cost of running the business (amounts entered directly)
- Reclaimable: a cost incurred on behalf of a contact, invoiced later
- Kilometre: travel for a contact, with amounts derived from a km rate

The shapes share one model; variant-specific fields are optional and the
expense classifier decides which are required for each tag.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import Field, field_validator, model_validator

from careledger.models.base import BaseDataModel, to_decimal, to_money


class ExpenseType(str, Enum):
    """Expense variant tag."""

    BUSINESS = "Business"
    RECLAIMABLE = "Reclaimable"
    KILOMETRE = "Kilometre"


class BusinessExpenseType(str, Enum):
    """Accounting treatment of a business expense."""

    CAPITAL = "Capital"
    GENERAL = "General"


class Expense(BaseDataModel):
    """A validated expense of any of the three variants.

    Build instances through ``ExpenseClassifier.validate`` so the
    per-variant rules and derived amounts are applied.

    Attributes:
        id: Expense identifier
        expense_type: Variant tag
        description: Free-text description
        date: Date the expense was incurred
        payee: Who was paid (Business, Reclaimable)
        business_expense_type: Capital or General (Business)
        category: Expense category (Business)
        contact_id: Contact to invoice (Reclaimable, Kilometre)
        km_rate_amount_excl_gst: Rate per kilometre excluding GST (Kilometre)
        kms: Whole kilometres travelled (Kilometre)
        is_gst_free: Whether the expense is GST free (Kilometre)
        amount_excl_gst: Amount excluding GST
        amount_gst: GST component
        amount_incl_gst: Amount including GST
        payment_method: How the expense was paid
        shift_id: Shift the expense was incurred on, if any
        invoice_id: Invoice the expense is attached to, if any
    """

    id: Optional[str] = Field(None, description="Expense identifier")
    expense_type: ExpenseType = Field(..., description="Expense variant")
    description: str = Field("", description="Description")
    date: Optional[dt.date] = Field(None, description="Expense date")
    payee: Optional[str] = Field(None, description="Payee")
    business_expense_type: Optional[BusinessExpenseType] = Field(
        None, description="Capital or General"
    )
    category: Optional[str] = Field(None, description="Expense category")
    contact_id: Optional[str] = Field(None, description="Contact to invoice")
    km_rate_amount_excl_gst: Optional[Decimal] = Field(
        None, ge=0, description="Rate per km excluding GST"
    )
    kms: Optional[int] = Field(None, ge=1, description="Kilometres travelled")
    is_gst_free: Optional[bool] = Field(None, description="GST free flag")
    amount_excl_gst: Decimal = Field(..., description="Amount excluding GST")
    amount_gst: Decimal = Field(..., ge=0, description="GST component")
    amount_incl_gst: Decimal = Field(..., description="Amount including GST")
    payment_method: Optional[str] = Field(None, description="Payment method")
    shift_id: Optional[str] = Field(None, description="Linked shift")
    invoice_id: Optional[str] = Field(None, description="Linked invoice")

    @field_validator(
        "amount_excl_gst", "amount_gst", "amount_incl_gst", mode="before"
    )
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert numeric values to 2-place Decimals for precision."""
        return to_money(v)

    @field_validator("km_rate_amount_excl_gst", mode="before")
    @classmethod
    def convert_rate_to_decimal(
        cls, v: Optional[Union[str, int, float, Decimal]]
    ) -> Optional[Decimal]:
        """Convert the km rate to a Decimal without rounding it."""
        if v is None:
            return v
        return to_decimal(v)

    @model_validator(mode="after")
    def validate_amounts_balance(self) -> "Expense":
        """Validate amount_incl_gst == amount_excl_gst + amount_gst.

        Raises:
            ValueError: If the three amounts do not balance
        """
        if self.amount_excl_gst + self.amount_gst != self.amount_incl_gst:
            raise ValueError(
                f"amount_incl_gst ({self.amount_incl_gst}) must equal "
                f"amount_excl_gst ({self.amount_excl_gst}) + "
                f"amount_gst ({self.amount_gst})"
            )
        return self

    @property
    def is_invoiced(self) -> bool:
        """Whether the expense is already attached to an invoice."""
        return self.invoice_id is not None

    @property
    def is_contact_billable(self) -> bool:
        """Whether the expense can be passed on to a contact's invoice."""
        return self.expense_type in (ExpenseType.RECLAIMABLE, ExpenseType.KILOMETRE)
