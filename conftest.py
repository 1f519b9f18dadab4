"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import os
from decimal import Decimal
from typing import Any, Callable, Dict
from zoneinfo import ZoneInfo

import pytest

from careledger.config import CareLedgerConfig, reload_config
from careledger.models import (
    BillableLine,
    Expense,
    ExpenseType,
    Invoice,
    LineSourceType,
    RateType,
    Receipt,
    ReceiptType,
    Shift,
    ShiftStatus,
)

SYDNEY = "Australia/Sydney"


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'ENVIRONMENT': 'testing',
        'DEBUG': 'false',
        'LOG_LEVEL': 'DEBUG',
        'GST_RATE': '0.10',
        'DEFAULT_TIMEZONE': SYDNEY,
        'TIMELINE_PAGE_SIZE': '100',
        'INVOICE_DUE_DAYS': '14',
        'FY_START_MONTH': '7',
        'FY_START_DAY': '1',
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import careledger.config.settings
    careledger.config.settings._config = None

    yield test_env_vars

    careledger.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> CareLedgerConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def make_shift() -> Callable[..., Shift]:
    """Factory for shifts; completed hourly 3 hour shifts in Sydney by default."""

    def _make(**overrides: Any) -> Shift:
        fields: Dict[str, Any] = {
            "id": "s1",
            "contact_id": "c1",
            "summary": "Community access",
            "start_date": dt.datetime(2024, 3, 4, 9, 0, tzinfo=ZoneInfo(SYDNEY)),
            "end_date": dt.datetime(2024, 3, 4, 12, 0, tzinfo=ZoneInfo(SYDNEY)),
            "rate_type": RateType.HOURLY,
            "rate_amount_excl_gst": Decimal("65.47"),
            "shift_status": ShiftStatus.COMPLETED,
            "is_gst_free": True,
            "total_excl_gst": Decimal("196.41"),
            "total_gst": Decimal("0.00"),
            "total_incl_gst": Decimal("196.41"),
        }
        fields.update(overrides)
        return Shift(**fields)

    return _make


@pytest.fixture
def completed_shift(make_shift) -> Shift:
    """A completed, GST-free 3 hour shift for contact c1."""
    return make_shift()


@pytest.fixture
def kilometre_expense() -> Expense:
    """Kilometre expense: 120 km at 0.85, GST applied."""
    return Expense(
        id="e1",
        expense_type=ExpenseType.KILOMETRE,
        contact_id="c1",
        date=dt.date(2024, 3, 4),
        km_rate_amount_excl_gst=Decimal("0.85"),
        kms=120,
        is_gst_free=False,
        amount_excl_gst=Decimal("102.00"),
        amount_gst=Decimal("10.20"),
        amount_incl_gst=Decimal("112.20"),
    )


@pytest.fixture
def reclaimable_expense() -> Expense:
    """Reclaimable expense for contact c1."""
    return Expense(
        id="e2",
        expense_type=ExpenseType.RECLAIMABLE,
        contact_id="c1",
        payee="Cinema",
        description="Movie tickets",
        date=dt.date(2024, 3, 5),
        amount_excl_gst=Decimal("20.00"),
        amount_gst=Decimal("2.00"),
        amount_incl_gst=Decimal("22.00"),
    )


@pytest.fixture
def business_expense() -> Expense:
    """Business expense with 10.00 GST."""
    return Expense(
        id="e3",
        expense_type=ExpenseType.BUSINESS,
        payee="Officeworks",
        category="Office Supplies",
        description="Printer supplies",
        date=dt.date(2024, 3, 6),
        amount_excl_gst=Decimal("100.00"),
        amount_gst=Decimal("10.00"),
        amount_incl_gst=Decimal("110.00"),
    )


@pytest.fixture
def sample_invoice() -> Invoice:
    """Invoice of 500.00 incl GST, due 2024-03-15, no receipts."""
    return Invoice(
        id="inv-1",
        code="INV-0001",
        contact_id="c1",
        date=dt.date(2024, 3, 1),
        due_date=dt.date(2024, 3, 15),
        lines=[
            BillableLine(
                id="shift-s1",
                source_type=LineSourceType.SHIFT,
                source_id="s1",
                description="Community access",
                date=dt.date(2024, 3, 1),
                amount_excl_gst=Decimal("454.55"),
                amount_gst=Decimal("45.45"),
                amount_incl_gst=Decimal("500.00"),
            )
        ],
    )


@pytest.fixture
def make_receipt() -> Callable[..., Receipt]:
    """Factory for receipts against inv-1; a 300.00 EFT payment by default."""

    def _make(**overrides: Any) -> Receipt:
        fields: Dict[str, Any] = {
            "id": "r1",
            "invoice_id": "inv-1",
            "receipt_type": ReceiptType.PAYMENT,
            "date": dt.date(2024, 3, 10),
            "amount_incl_gst": Decimal("300.00"),
            "payment_method": "EFT",
        }
        fields.update(overrides)
        return Receipt(**fields)

    return _make


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    test_files = ['coverage.xml', '.coverage']
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
