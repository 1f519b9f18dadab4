"""Report writers producing pandas DataFrames."""

from careledger.writers.ledger_report_generator import (
    LedgerReportData,
    LedgerReportGenerator,
)

__all__ = ["LedgerReportData", "LedgerReportGenerator"]
