"""Invoice ledger: receipts, write-offs and effective status."""

from careledger.ledger.receipt_ledger import (
    LedgerSummary,
    apply_receipt,
    remove_receipt,
    split_receipt,
    summarize_ledger,
)
from careledger.ledger.status_resolver import (
    days_overdue,
    effective_status,
    is_overdue,
)

__all__ = [
    "LedgerSummary",
    "apply_receipt",
    "remove_receipt",
    "split_receipt",
    "summarize_ledger",
    "days_overdue",
    "effective_status",
    "is_overdue",
]
