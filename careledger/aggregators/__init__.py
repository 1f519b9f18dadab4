"""Aggregators turning billable work into invoices."""

from careledger.aggregators.invoice_aggregator import InvoiceAggregator

__all__ = ["InvoiceAggregator"]
