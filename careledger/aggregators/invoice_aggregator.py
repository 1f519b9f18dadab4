"""Invoice aggregator for building invoices from shifts and expenses.

This module turns a selection of billable work into an invoice draft:
- Selecting a contact's billable shifts and expenses
- Checking every selected item exists, belongs to the contact and is free
  to attach to a new invoice
- Building one billable line per shift (its completed total) and one per
  expense, shifts first
- Editing an invoice's dates while its line set stays frozen
- Filtering invoice lists by effective status, contact and date range
"""

import datetime as dt
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from careledger.calculators.shift_calculator import is_shift_billable
from careledger.errors import ErrorCode
from careledger.ledger.status_resolver import effective_status
from careledger.models.expense import Expense
from careledger.models.invoice import (
    BillableLine,
    Invoice,
    InvoiceDraft,
    InvoiceStatus,
    LineSourceType,
)
from careledger.models.shift import Shift
from careledger.validators.validation_report import (
    ValidationReport,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def _always_billable(item_id: str) -> bool:
    return True


class InvoiceAggregator:
    """Builds invoice drafts from a contact's billable shifts and expenses.

    The aggregator is pure: it never persists anything. Whether an item is
    still free to attach is answered by the ``is_billable`` callable, which
    the surrounding application backs with its own store.

    Example:
        >>> aggregator = InvoiceAggregator(timezone="Australia/Sydney")
        >>> result = aggregator.draft_invoice(
        ...     contact_id="c1",
        ...     date=dt.date(2024, 3, 1),
        ...     due_date=dt.date(2024, 3, 15),
        ...     shift_ids=["s1"],
        ...     expense_ids=["e1"],
        ...     shifts=shifts,
        ...     expenses=expenses,
        ... )
        >>> result.unwrap().total_incl_gst
        Decimal('308.61')
    """

    def __init__(
        self,
        is_billable: Optional[Callable[[str], bool]] = None,
        timezone: str = "UTC",
    ) -> None:
        """Initialize the aggregator.

        Args:
            is_billable: Answers whether a shift or expense id is free to
                attach to a new invoice (defaults to always True)
            timezone: Organization zone used to date shift lines
        """
        self.is_billable = is_billable or _always_billable
        self.timezone = timezone

    def select_billable_shifts(
        self, shifts: Iterable[Shift], contact_id: str
    ) -> List[Shift]:
        """Pick a contact's shifts that can go on a new invoice.

        Args:
            shifts: Candidate shifts
            contact_id: Contact being invoiced

        Returns:
            Billable shifts, oldest first
        """
        selected = [
            shift
            for shift in shifts
            if shift.contact_id == contact_id
            and is_shift_billable(shift)
            and self.is_billable(shift.id)
        ]
        selected.sort(key=lambda s: (s.start_date, s.id))
        logger.info(f"Selected {len(selected)} billable shifts for {contact_id}")
        return selected

    def select_billable_expenses(
        self, expenses: Iterable[Expense], contact_id: str
    ) -> List[Expense]:
        """Pick a contact's reclaimable and kilometre expenses not yet invoiced.

        Args:
            expenses: Candidate expenses
            contact_id: Contact being invoiced

        Returns:
            Billable expenses, oldest first (undated last)
        """
        selected = [
            expense
            for expense in expenses
            if expense.contact_id == contact_id
            and expense.is_contact_billable
            and not expense.is_invoiced
            and self.is_billable(expense.id)
        ]
        selected.sort(key=lambda e: (e.date is None, e.date or dt.date.min, e.id))
        logger.info(f"Selected {len(selected)} billable expenses for {contact_id}")
        return selected

    def draft_invoice(
        self,
        contact_id: str,
        date: dt.date,
        due_date: dt.date,
        shift_ids: Sequence[str],
        expense_ids: Sequence[str],
        shifts: Iterable[Shift] = (),
        expenses: Iterable[Expense] = (),
        notes: Optional[str] = None,
    ) -> ValidationResult[InvoiceDraft]:
        """Build an invoice draft from selected shifts and expenses.

        Every problem found is reported: unknown ids fail with
        MissingField, items of another contact or already attached to an
        invoice fail with AlreadyInvoiced, and a due date before the
        invoice date fails with InvalidDateRange.

        Args:
            contact_id: Contact being invoiced
            date: Invoice date
            due_date: Payment due date (not before ``date``)
            shift_ids: Selected shift ids, in line order
            expense_ids: Selected expense ids, in line order
            shifts: Candidate shifts the ids are resolved against
            expenses: Candidate expenses the ids are resolved against
            notes: Optional invoice notes

        Returns:
            ValidationResult holding the InvoiceDraft or the errors found
        """
        logger.info(
            f"Drafting invoice for {contact_id}: {len(shift_ids)} shifts, "
            f"{len(expense_ids)} expenses"
        )
        report = ValidationReport()

        if not contact_id or not contact_id.strip():
            report.add_error(
                "contact_id",
                "contact_id is required",
                contact_id,
                ErrorCode.MISSING_FIELD,
            )
        self._check_dates(date, due_date, report)

        shifts_by_id: Dict[str, Shift] = {shift.id: shift for shift in shifts}
        expenses_by_id: Dict[str, Expense] = {e.id: e for e in expenses}

        lines: List[BillableLine] = []
        for shift_id in self._unique(shift_ids, "shift_ids", report):
            line = self._shift_line(
                shifts_by_id.get(shift_id), shift_id, contact_id, report
            )
            if line is not None:
                lines.append(line)
        for expense_id in self._unique(expense_ids, "expense_ids", report):
            line = self._expense_line(
                expenses_by_id.get(expense_id), expense_id, contact_id, date, report
            )
            if line is not None:
                lines.append(line)

        if not shift_ids and not expense_ids:
            report.add_error(
                "lines",
                "An invoice needs at least one shift or expense",
                [],
                ErrorCode.MISSING_FIELD,
            )

        if not report.is_valid():
            logger.info(f"Invoice draft for {contact_id} rejected: {report.summary()}")
            return ValidationResult.failure(report)

        draft = InvoiceDraft(
            contact_id=contact_id,
            date=date,
            due_date=due_date,
            lines=lines,
            notes=notes,
        )
        logger.info(
            f"Drafted invoice for {contact_id}: {len(lines)} lines, "
            f"{draft.total_incl_gst} incl GST"
        )
        return ValidationResult.success(draft, report)

    def update_invoice_dates(
        self,
        invoice: Invoice,
        date: dt.date,
        due_date: dt.date,
        shift_ids: Optional[Sequence[str]] = None,
        expense_ids: Optional[Sequence[str]] = None,
    ) -> ValidationResult[Invoice]:
        """Edit an invoice's dates. The line set cannot change.

        ``shift_ids`` and ``expense_ids`` are what the editor submitted;
        passing anything other than the invoice's current ids fails with
        ImmutableLineSet.

        Args:
            invoice: Invoice being edited
            date: New invoice date
            due_date: New due date
            shift_ids: Submitted shift ids, if any
            expense_ids: Submitted expense ids, if any

        Returns:
            ValidationResult holding the updated Invoice
        """
        report = ValidationReport()
        self._check_dates(date, due_date, report)

        if shift_ids is not None and set(shift_ids) != set(invoice.shift_ids):
            report.add_error(
                "shift_ids",
                f"Lines of invoice {invoice.id} cannot be changed",
                list(shift_ids),
                ErrorCode.IMMUTABLE_LINE_SET,
            )
        if expense_ids is not None and set(expense_ids) != set(invoice.expense_ids):
            report.add_error(
                "expense_ids",
                f"Lines of invoice {invoice.id} cannot be changed",
                list(expense_ids),
                ErrorCode.IMMUTABLE_LINE_SET,
            )

        if not report.is_valid():
            return ValidationResult.failure(report)

        logger.info(f"Updated dates of invoice {invoice.id}: {date} due {due_date}")
        return ValidationResult.success(
            invoice.model_copy(update={"date": date, "due_date": due_date})
        )

    def filter_invoices(
        self,
        invoices: Iterable[Invoice],
        today: dt.date,
        status: Optional[InvoiceStatus] = None,
        contact_id: Optional[str] = None,
        date_from: Optional[dt.date] = None,
        date_to: Optional[dt.date] = None,
    ) -> List[Invoice]:
        """Filter invoices by effective status, contact and invoice date.

        Args:
            invoices: Invoices to filter
            today: Reference day for status resolution
            status: Keep only invoices resolving to this status
            contact_id: Keep only this contact's invoices
            date_from: Earliest invoice date (inclusive)
            date_to: Latest invoice date (inclusive)

        Returns:
            Matching invoices, in input order

        Example:
            >>> overdue = aggregator.filter_invoices(
            ...     invoices, today, status=InvoiceStatus.OVERDUE
            ... )
        """
        filtered = [
            invoice
            for invoice in invoices
            if (contact_id is None or invoice.contact_id == contact_id)
            and (date_from is None or invoice.date >= date_from)
            and (date_to is None or invoice.date <= date_to)
            and (status is None or effective_status(invoice, today) == status)
        ]
        logger.info(f"Filtered to {len(filtered)} invoices")
        return filtered

    def _check_dates(
        self, date: dt.date, due_date: dt.date, report: ValidationReport
    ) -> None:
        if date is None:
            report.add_error("date", "date is required", date, ErrorCode.MISSING_FIELD)
        if due_date is None:
            report.add_error(
                "due_date", "due_date is required", due_date, ErrorCode.MISSING_FIELD
            )
        if date is not None and due_date is not None and date > due_date:
            report.add_error(
                "due_date",
                f"due_date ({due_date}) cannot be before date ({date})",
                due_date,
                ErrorCode.INVALID_DATE_RANGE,
            )

    def _unique(
        self, ids: Sequence[str], field: str, report: ValidationReport
    ) -> List[str]:
        unique: List[str] = []
        for item_id in ids:
            if item_id in unique:
                report.add_warning(field, f"{item_id} selected twice", item_id)
                continue
            unique.append(item_id)
        return unique

    def _shift_line(
        self,
        shift: Optional[Shift],
        shift_id: str,
        contact_id: str,
        report: ValidationReport,
    ) -> Optional[BillableLine]:
        context = {"shift_id": shift_id}
        if shift is None:
            report.add_error(
                "shift_ids",
                f"Shift {shift_id} not found",
                shift_id,
                ErrorCode.MISSING_FIELD,
                context,
            )
            return None
        if shift.contact_id != contact_id:
            report.add_error(
                "shift_ids",
                f"Shift {shift_id} belongs to contact {shift.contact_id}",
                shift_id,
                ErrorCode.ALREADY_INVOICED,
                context,
            )
            return None
        if not is_shift_billable(shift) or not self.is_billable(shift_id):
            report.add_error(
                "shift_ids",
                f"Shift {shift_id} ({shift.shift_status.value}) is not billable "
                f"or is already on an invoice",
                shift_id,
                ErrorCode.ALREADY_INVOICED,
                context,
            )
            return None

        return self._build_line(
            report,
            context,
            id=f"shift-{shift.id}",
            source_type=LineSourceType.SHIFT,
            source_id=shift.id,
            description=shift.summary or shift.code or "Shift",
            date=shift.local_date(self.timezone),
            amount_excl_gst=shift.total_excl_gst,
            amount_gst=shift.total_gst,
            amount_incl_gst=shift.total_incl_gst,
        )

    def _expense_line(
        self,
        expense: Optional[Expense],
        expense_id: str,
        contact_id: str,
        invoice_date: dt.date,
        report: ValidationReport,
    ) -> Optional[BillableLine]:
        context = {"expense_id": expense_id}
        if expense is None:
            report.add_error(
                "expense_ids",
                f"Expense {expense_id} not found",
                expense_id,
                ErrorCode.MISSING_FIELD,
                context,
            )
            return None
        if expense.contact_id != contact_id or not expense.is_contact_billable:
            report.add_error(
                "expense_ids",
                f"Expense {expense_id} is not billable to contact {contact_id}",
                expense_id,
                ErrorCode.ALREADY_INVOICED,
                context,
            )
            return None
        if expense.is_invoiced or not self.is_billable(expense_id):
            report.add_error(
                "expense_ids",
                f"Expense {expense_id} is already on an invoice",
                expense_id,
                ErrorCode.ALREADY_INVOICED,
                context,
            )
            return None

        return self._build_line(
            report,
            context,
            id=f"expense-{expense.id}",
            source_type=LineSourceType.EXPENSE,
            source_id=expense.id,
            description=(
                expense.description or expense.payee or expense.expense_type.value
            ),
            date=expense.date or invoice_date,
            amount_excl_gst=expense.amount_excl_gst,
            amount_gst=expense.amount_gst,
            amount_incl_gst=expense.amount_incl_gst,
        )

    def _build_line(
        self, report: ValidationReport, context: Dict[str, str], **fields
    ) -> Optional[BillableLine]:
        try:
            return BillableLine(**fields)
        except ValidationError as e:
            report.add_error(
                "lines",
                f"Line {fields['id']} has inconsistent amounts",
                str(e),
                ErrorCode.INVALID_AMOUNT,
                context,
            )
            return None
