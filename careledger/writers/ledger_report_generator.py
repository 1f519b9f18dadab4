"""Ledger report generator for invoice and GST reporting DataFrames.

This module builds the reporting views over invoices and expenses:
- Invoice register: one row per invoice with balances and effective status
- Invoice summary: invoice count and amounts per effective status
- GST summary: GST collected on payments received against GST paid on
  business expenses over a period (cash basis), and the net payable
"""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import pandas as pd

from careledger.calculators.fiscal_period import DateRange
from careledger.ledger.status_resolver import days_overdue, effective_status
from careledger.models.expense import Expense, ExpenseType
from careledger.models.invoice import Invoice, InvoiceStatus, ReceiptType

logger = logging.getLogger(__name__)


@dataclass
class LedgerReportData:
    """Container for all ledger report DataFrames.

    Attributes:
        invoice_register: One row per invoice
        invoice_summary: Totals per effective status
        tax_receipts: Payments received in the period
        tax_expenses: Business expenses in the period
        gst_summary: Receipts, expenses and net rows (excl, GST, incl)
    """

    invoice_register: pd.DataFrame
    invoice_summary: pd.DataFrame
    tax_receipts: pd.DataFrame
    tax_expenses: pd.DataFrame
    gst_summary: pd.DataFrame


class LedgerReportGenerator:
    """Generate ledger report DataFrames from invoices and expenses.

    Status columns are resolved against ``today`` when the report is
    built; nothing is read from stored status.

    Example:
        >>> generator = LedgerReportGenerator(invoices, expenses, dt.date(2024, 4, 1))
        >>> register = generator.invoice_register()
        >>> register["Status"].tolist()
        ['Overdue', 'Paid']
    """

    def __init__(
        self,
        invoices: Iterable[Invoice],
        expenses: Iterable[Expense] = (),
        today: Optional[dt.date] = None,
    ):
        """Initialize with the invoices and expenses to report on.

        Args:
            invoices: Invoices with their receipts
            expenses: Expenses of the organization
            today: Reference day for status resolution (default: today)
        """
        self.invoices = list(invoices)
        self.expenses = list(expenses)
        self.today = today or dt.date.today()

    def generate(self, date_range: DateRange) -> LedgerReportData:
        """Generate all ledger report DataFrames.

        Args:
            date_range: Period for the GST views

        Returns:
            LedgerReportData with every report
        """
        logger.info(
            f"Generating ledger reports for {len(self.invoices)} invoices, "
            f"{len(self.expenses)} expenses ({date_range.start} to {date_range.end})"
        )
        return LedgerReportData(
            invoice_register=self.invoice_register(),
            invoice_summary=self.invoice_summary(),
            tax_receipts=self.tax_receipts(date_range),
            tax_expenses=self.tax_expenses(date_range),
            gst_summary=self.gst_summary(date_range),
        )

    def invoice_register(self) -> pd.DataFrame:
        """Build the invoice register, ordered by invoice date then code."""
        if not self.invoices:
            return pd.DataFrame(columns=self._get_register_columns())

        rows = []
        for invoice in sorted(self.invoices, key=lambda i: (i.date, i.code, i.id)):
            rows.append(
                {
                    "Code": invoice.code or invoice.id,
                    "Contact": invoice.contact_id,
                    "Date": self._format_date(invoice.date),
                    "Due Date": self._format_date(invoice.due_date),
                    "Total excl GST": float(invoice.total_excl_gst),
                    "GST": float(invoice.total_gst),
                    "Total incl GST": float(invoice.total_incl_gst),
                    "Paid": float(invoice.paid_incl_gst),
                    "Written Off": float(invoice.written_off_incl_gst),
                    "Outstanding": float(invoice.outstanding_incl_gst),
                    "Status": effective_status(invoice, self.today).value,
                    "Days Overdue": days_overdue(invoice, self.today),
                }
            )

        return pd.DataFrame(rows, columns=self._get_register_columns())

    def invoice_summary(self) -> pd.DataFrame:
        """Count and amounts of invoices per effective status.

        Every status has a row, in precedence order, even when zero.
        """
        register = self.invoice_register()
        statuses = [s.value for s in InvoiceStatus]

        summary = (
            register.groupby("Status")
            .agg(
                Count=("Code", "count"),
                Total=("Total incl GST", "sum"),
                Outstanding=("Outstanding", "sum"),
            )
            .reindex(statuses, fill_value=0)
        )
        summary.index.name = "Status"
        return summary.reset_index()

    def tax_receipts(self, date_range: DateRange) -> pd.DataFrame:
        """Payments received in the period, with the invoice they settle.

        Write-offs are not cash received and are left out.
        """
        rows = []
        for invoice in self.invoices:
            for receipt in invoice.receipts:
                if receipt.receipt_type != ReceiptType.PAYMENT:
                    continue
                if receipt.date not in date_range:
                    continue
                rows.append(
                    {
                        "Date": self._format_date(receipt.date),
                        "Invoice": invoice.code or invoice.id,
                        "Excl GST": float(receipt.amount_excl_gst),
                        "GST": float(receipt.amount_gst),
                        "Incl GST": float(receipt.amount_incl_gst),
                    }
                )

        df = pd.DataFrame(rows, columns=self._get_receipt_columns())
        return df.sort_values(["Date", "Invoice"], ignore_index=True)

    def tax_expenses(self, date_range: DateRange) -> pd.DataFrame:
        """Business expenses dated in the period."""
        rows = []
        for expense in self.expenses:
            if expense.expense_type != ExpenseType.BUSINESS:
                continue
            if expense.date is None or expense.date not in date_range:
                continue
            rows.append(
                {
                    "Date": self._format_date(expense.date),
                    "Payee": expense.payee or "",
                    "Category": expense.category or "",
                    "Description": expense.description or "",
                    "Excl GST": float(expense.amount_excl_gst),
                    "GST": float(expense.amount_gst),
                    "Incl GST": float(expense.amount_incl_gst),
                }
            )

        df = pd.DataFrame(rows, columns=self._get_expense_columns())
        return df.sort_values(["Date", "Payee"], ignore_index=True)

    def gst_summary(self, date_range: DateRange) -> pd.DataFrame:
        """Receipts, expenses and net totals for the period.

        Net = receipts - expenses; a positive net GST is payable.
        """
        receipts = self._totals(self.tax_receipts(date_range))
        expenses = self._totals(self.tax_expenses(date_range))
        net = {key: round(receipts[key] - expenses[key], 2) for key in receipts}

        return pd.DataFrame(
            [
                {"Line": "Receipts", **receipts},
                {"Line": "Expenses", **expenses},
                {"Line": "Net", **net},
            ],
            columns=["Line", "Excl GST", "GST", "Incl GST"],
        )

    def _totals(self, df: pd.DataFrame) -> Dict[str, float]:
        return {
            column: round(float(df[column].sum()), 2) if not df.empty else 0.0
            for column in ("Excl GST", "GST", "Incl GST")
        }

    def _get_register_columns(self) -> List[str]:
        """Get the column names for the invoice register.

        Returns:
            List of column names in correct order
        """
        return [
            "Code",
            "Contact",
            "Date",
            "Due Date",
            "Total excl GST",
            "GST",
            "Total incl GST",
            "Paid",
            "Written Off",
            "Outstanding",
            "Status",
            "Days Overdue",
        ]

    def _get_receipt_columns(self) -> List[str]:
        return ["Date", "Invoice", "Excl GST", "GST", "Incl GST"]

    def _get_expense_columns(self) -> List[str]:
        return [
            "Date",
            "Payee",
            "Category",
            "Description",
            "Excl GST",
            "GST",
            "Incl GST",
        ]

    def _format_date(self, date_obj: dt.date) -> str:
        """Format date as YYYY-MM-DD string."""
        return date_obj.strftime("%Y-%m-%d")
