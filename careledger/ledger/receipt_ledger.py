"""Receipt ledger for invoices.

Payments and write-offs are appended to (or removed from) an invoice's
receipt list, producing a new Invoice. Balances are computed properties
of the invoice, so every call is followed by a full resummation of the
ledger and the result does not depend on the order receipts arrived in.

Over-payment is not rejected: the outstanding balance goes negative, the
invoice reports ``is_over_allocated`` and a warning is logged, so the
discrepancy stays visible for reconciliation.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from careledger.calculators.gst_calculator import GstAmounts, round_currency
from careledger.errors import ErrorCode
from careledger.models.invoice import (
    Invoice,
    PaymentMethod,
    Receipt,
    ReceiptType,
)
from careledger.validators.validation_report import (
    ValidationReport,
    ValidationResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSummary:
    """Snapshot of an invoice's ledger balances.

    Attributes:
        invoice_id: Invoice the summary belongs to
        total_incl_gst: Invoice total including GST
        paid_incl_gst: Sum of payments including GST
        written_off_incl_gst: Sum of write-offs including GST
        outstanding_incl_gst: Raw outstanding balance (may be negative)
        outstanding_excl_gst: Raw outstanding balance excluding GST
        display_outstanding_incl_gst: Outstanding balance floored at zero
        is_over_allocated: True when receipts exceed the total
        payment_count: Number of payment receipts
        write_off_count: Number of write-off receipts
    """

    invoice_id: str
    total_incl_gst: Decimal
    paid_incl_gst: Decimal
    written_off_incl_gst: Decimal
    outstanding_incl_gst: Decimal
    outstanding_excl_gst: Decimal
    display_outstanding_incl_gst: Decimal
    is_over_allocated: bool
    payment_count: int
    write_off_count: int


def _check_receipt(
    invoice: Invoice, receipt: Receipt, report: ValidationReport
) -> None:
    if receipt.invoice_id != invoice.id:
        report.add_error(
            "invoice_id",
            f"Receipt {receipt.id} belongs to invoice {receipt.invoice_id}, "
            f"not {invoice.id}",
            receipt.invoice_id,
            ErrorCode.MISSING_FIELD,
        )

    if receipt.amount_incl_gst <= Decimal("0.00"):
        report.add_error(
            "amount_incl_gst",
            f"Receipt amount must be greater than 0, got {receipt.amount_incl_gst}",
            receipt.amount_incl_gst,
            ErrorCode.NEGATIVE_RECEIPT,
        )

    if receipt.receipt_type == ReceiptType.PAYMENT:
        other = receipt.other_payment_method
        if receipt.payment_method == PaymentMethod.OTHER and not (
            other and other.strip()
        ):
            report.add_error(
                "other_payment_method",
                "other_payment_method is required when payment_method is Other",
                other,
                ErrorCode.MISSING_FIELD,
            )


def split_receipt(invoice: Invoice, amount_incl_gst: Decimal) -> GstAmounts:
    """Split a receipt amount in proportion to the invoice's GST.

    A receipt against an invoice of GST-free lines carries no GST; one
    against a standard-rated invoice carries the invoice's share of GST.

    Example:
        >>> split_receipt(invoice, Decimal("300.00")).amount_gst
        Decimal('27.27')
    """
    if invoice.total_incl_gst == 0:
        gst = Decimal("0.00")
    else:
        gst = round_currency(
            amount_incl_gst * invoice.total_gst / invoice.total_incl_gst
        )
    return GstAmounts(
        amount_excl_gst=amount_incl_gst - gst,
        amount_gst=gst,
        amount_incl_gst=amount_incl_gst,
    )


def apply_receipt(invoice: Invoice, receipt: Receipt) -> ValidationResult[Invoice]:
    """Record a payment or write-off against an invoice.

    A receipt whose id is already on the invoice replaces the stored
    copy, so re-delivering the same receipt does not double count it.
    The receipt's exclusive and GST parts are re-derived from the
    invoice's lines with ``split_receipt``.

    Args:
        invoice: Invoice to record against
        receipt: Payment or write-off to record

    Returns:
        ValidationResult holding the updated Invoice. Failures carry
        NegativeReceipt for non-positive amounts and MissingField for a
        receipt on another invoice or an undescribed "Other" method.

    Example:
        >>> result = apply_receipt(invoice, payment)
        >>> result.unwrap().outstanding_incl_gst
        Decimal('200.00')
    """
    report = ValidationReport()
    _check_receipt(invoice, receipt, report)
    if not report.is_valid():
        logger.debug(f"Rejected receipt {receipt.id}: {report.summary()}")
        return ValidationResult.failure(report)

    if receipt.receipt_type == ReceiptType.WRITE_OFF and (
        receipt.payment_method is not None or receipt.other_payment_method
    ):
        report.add_warning(
            "payment_method",
            "Write-offs carry no payment method; it was dropped",
            receipt.payment_method,
        )
        receipt = receipt.model_copy(
            update={"payment_method": None, "other_payment_method": None}
        )

    split = split_receipt(invoice, receipt.amount_incl_gst)
    receipt = receipt.model_copy(
        update={
            "amount_excl_gst": split.amount_excl_gst,
            "amount_gst": split.amount_gst,
        }
    )

    receipts: List[Receipt] = [r for r in invoice.receipts if r.id != receipt.id]
    if len(receipts) != len(invoice.receipts):
        report.add_warning(
            "id", f"Receipt {receipt.id} was already recorded; replaced", receipt.id
        )
    receipts.append(receipt)

    updated = invoice.model_copy(update={"receipts": receipts})
    if updated.is_over_allocated:
        logger.warning(
            f"Invoice {invoice.id} is over-allocated by "
            f"{-updated.outstanding_incl_gst} after receipt {receipt.id}"
        )
        report.add_warning(
            "outstanding_incl_gst",
            "Receipts exceed the invoice total",
            updated.outstanding_incl_gst,
            context={"invoice_id": invoice.id},
        )

    logger.info(
        f"Recorded {receipt.receipt_type.value} {receipt.id} of "
        f"{receipt.amount_incl_gst} on invoice {invoice.id}; "
        f"outstanding {updated.outstanding_incl_gst}"
    )
    return ValidationResult.success(updated, report)


def remove_receipt(invoice: Invoice, receipt_id: str) -> ValidationResult[Invoice]:
    """Remove a receipt from an invoice and recompute its balances.

    Args:
        invoice: Invoice holding the receipt
        receipt_id: Id of the receipt to remove

    Returns:
        ValidationResult holding the updated Invoice, or a MissingField
        failure on ``receipt_id`` if the invoice has no such receipt
    """
    receipts = [r for r in invoice.receipts if r.id != receipt_id]
    if len(receipts) == len(invoice.receipts):
        return ValidationResult.error(
            "receipt_id",
            f"Invoice {invoice.id} has no receipt {receipt_id}",
            receipt_id,
            ErrorCode.MISSING_FIELD,
        )

    updated = invoice.model_copy(update={"receipts": receipts})
    logger.info(
        f"Removed receipt {receipt_id} from invoice {invoice.id}; "
        f"outstanding {updated.outstanding_incl_gst}"
    )
    return ValidationResult.success(updated)


def summarize_ledger(invoice: Invoice) -> LedgerSummary:
    """Summarize the balances of an invoice's ledger."""
    return LedgerSummary(
        invoice_id=invoice.id,
        total_incl_gst=invoice.total_incl_gst,
        paid_incl_gst=invoice.paid_incl_gst,
        written_off_incl_gst=invoice.written_off_incl_gst,
        outstanding_incl_gst=invoice.outstanding_incl_gst,
        outstanding_excl_gst=invoice.outstanding_excl_gst,
        display_outstanding_incl_gst=invoice.display_outstanding_incl_gst,
        is_over_allocated=invoice.is_over_allocated,
        payment_count=sum(
            1 for r in invoice.receipts if r.receipt_type == ReceiptType.PAYMENT
        ),
        write_off_count=sum(
            1 for r in invoice.receipts if r.receipt_type == ReceiptType.WRITE_OFF
        ),
    )
