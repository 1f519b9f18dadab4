"""Calculator modules for the billing core."""

from careledger.calculators.fiscal_period import (
    DateRange,
    current_fiscal_year,
    month_range,
    previous_fiscal_year,
)
from careledger.calculators.gst_calculator import (
    DEFAULT_GST_RATE,
    GstAmounts,
    apply_gst,
    apply_gst_to_cents,
    calculate_kilometre_amounts,
    round_currency,
    split_gst_inclusive,
)
from careledger.calculators.shift_calculator import (
    calculate_shift_total,
    cancel_shift,
    complete_shift,
    is_shift_billable,
)

__all__ = [
    # fiscal_period
    "DateRange",
    "current_fiscal_year",
    "month_range",
    "previous_fiscal_year",
    # gst_calculator
    "DEFAULT_GST_RATE",
    "GstAmounts",
    "apply_gst",
    "apply_gst_to_cents",
    "calculate_kilometre_amounts",
    "round_currency",
    "split_gst_inclusive",
    # shift_calculator
    "calculate_shift_total",
    "cancel_shift",
    "complete_shift",
    "is_shift_billable",
]
