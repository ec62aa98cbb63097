"""SitterPay: babysitting pay calculator (bedtime / midnight rate buckets)."""

from sitterpay.costing import HourBreakdown, PayCalculator, PayResult, RateConfig

__version__ = "0.1.0"

__all__ = ["HourBreakdown", "PayCalculator", "PayResult", "RateConfig", "__version__"]
