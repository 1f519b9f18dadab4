"""CareLedger - billing, invoice reconciliation and shift timeline core
for care-provider business management."""

__version__ = "1.0.0"
