"""Billing service wiring the pure billing core to its collaborators."""

import datetime as dt
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from careledger.aggregators.invoice_aggregator import InvoiceAggregator
from careledger.config.settings import CareLedgerConfig, get_config
from careledger.errors import ErrorCode
from careledger.ledger.receipt_ledger import apply_receipt, remove_receipt
from careledger.ledger.status_resolver import effective_status
from careledger.models.expense import Expense
from careledger.models.invoice import Invoice, InvoiceStatus, Receipt
from careledger.models.shift import Shift
from careledger.services.interfaces import (
    BillabilityChecker,
    InvoiceRepository,
    OrganizationContext,
    ShiftPageFetcher,
)
from careledger.timeline.grouping import today_in_timezone
from careledger.timeline.paginator import ShiftTimeline
from careledger.utils.logging_utils import (
    LogContext,
    generate_correlation_id,
    log_function_call,
)
from careledger.validators.expense_classifier import ExpenseClassifier
from careledger.validators.validation_report import (
    ValidationReport,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class BillingService:
    """Runs billing operations against the application's stores.

    Every core decision (validation, line building, balances, status) is
    made by the pure components; this class supplies them with the
    organization's timezone and settings, persists their results, and
    checks billability again right before an invoice is stored.
    """

    def __init__(
        self,
        repository: InvoiceRepository,
        billability: BillabilityChecker,
        organization: OrganizationContext,
        shift_fetcher: Optional[ShiftPageFetcher] = None,
        config: Optional[CareLedgerConfig] = None,
    ) -> None:
        self.repository = repository
        self.billability = billability
        self.organization = organization
        self.shift_fetcher = shift_fetcher
        self.config = config or get_config()
        self.classifier = ExpenseClassifier(self.config.gst_rate)

    @property
    def timezone(self) -> str:
        return self.organization.current_organization_timezone()

    def today(self, now: Optional[dt.datetime] = None) -> dt.date:
        return today_in_timezone(self.timezone, now)

    def aggregator(self) -> InvoiceAggregator:
        return InvoiceAggregator(self.billability.is_billable, self.timezone)

    def validate_expense(self, raw: Mapping[str, Any]) -> ValidationResult[Expense]:
        result = self.classifier.validate(raw)
        logger.debug(f"Expense validation: {result.report.summary()}")
        return result

    @log_function_call
    def create_invoice(
        self,
        contact_id: str,
        shift_ids: Sequence[str],
        expense_ids: Sequence[str],
        shifts: Iterable[Shift] = (),
        expenses: Iterable[Expense] = (),
        date: Optional[dt.date] = None,
        due_date: Optional[dt.date] = None,
        notes: Optional[str] = None,
    ) -> ValidationResult[Invoice]:
        """Draft, re-check and persist an invoice.

        ``date`` defaults to the organization's today and ``due_date`` to
        ``INVOICE_DUE_DAYS`` after it.
        """
        date = date or self.today()
        due_date = due_date or date + dt.timedelta(days=self.config.invoice_due_days)

        with LogContext(
            correlation_id=generate_correlation_id(), contact_id=contact_id
        ):
            drafted = self.aggregator().draft_invoice(
                contact_id,
                date,
                due_date,
                shift_ids,
                expense_ids,
                shifts=shifts,
                expenses=expenses,
                notes=notes,
            )
            if not drafted.is_valid():
                return ValidationResult.failure(drafted.report)
            draft = drafted.unwrap()

            # Another session may have invoiced an item since it was selected
            report = ValidationReport()
            for item_id in draft.shift_ids + draft.expense_ids:
                if not self.billability.is_billable(item_id):
                    report.add_error(
                        "lines",
                        f"{item_id} was invoiced while this invoice was drafted",
                        item_id,
                        ErrorCode.ALREADY_INVOICED,
                    )
            if not report.is_valid():
                logger.warning(
                    f"Invoice for contact {contact_id} lost a race: "
                    f"{report.summary()}"
                )
                return ValidationResult.failure(report)

            invoice = self.repository.persist_invoice(draft)
            logger.info(
                f"Invoice created: id={invoice.id}, code={invoice.code}, "
                f"total={invoice.total_incl_gst}"
            )
            return ValidationResult.success(invoice, drafted.report)

    @log_function_call
    def record_receipt(
        self, invoice: Invoice, receipt: Receipt
    ) -> ValidationResult[Invoice]:
        with LogContext(invoice_id=invoice.id, receipt_id=receipt.id):
            result = apply_receipt(invoice, receipt)
            if not result.is_valid():
                return result
            updated = result.unwrap()
            stored = next(r for r in updated.receipts if r.id == receipt.id)
            self.repository.persist_receipt(invoice.id, stored)
            logger.info(
                f"Receipt {receipt.id} persisted; "
                f"outstanding={updated.outstanding_incl_gst}"
            )
            return result

    @log_function_call
    def delete_receipt(
        self, invoice: Invoice, receipt_id: str
    ) -> ValidationResult[Invoice]:
        with LogContext(invoice_id=invoice.id, receipt_id=receipt_id):
            result = remove_receipt(invoice, receipt_id)
            if not result.is_valid():
                logger.warning(
                    f"Delete failed: receipt {receipt_id} not on invoice {invoice.id}"
                )
                return result
            self.repository.delete_receipt(receipt_id)
            logger.info(f"Receipt {receipt_id} deleted")
            return result

    def invoice_status(
        self, invoice: Invoice, now: Optional[dt.datetime] = None
    ) -> InvoiceStatus:
        return effective_status(invoice, self.today(now))

    def invoices_with_status(
        self,
        invoices: Iterable[Invoice],
        status: InvoiceStatus,
        now: Optional[dt.datetime] = None,
    ) -> List[Invoice]:
        return self.aggregator().filter_invoices(
            invoices, self.today(now), status=status
        )

    def shift_timeline(self, contact_id: Optional[str]) -> ShiftTimeline:
        if self.shift_fetcher is None:
            raise ValueError("BillingService has no shift fetcher configured")
        return ShiftTimeline(
            self.shift_fetcher,
            contact_id,
            self.timezone,
            page_size=self.config.timeline_page_size,
        )
