"""Costing helper exports."""

from .calculator import (
    HourBreakdown,
    NormalizedShift,
    PayCalculator,
    PayResult,
    ValidationResult,
)
from .rates import DEFAULT_RATE_CONFIG, PayRates, RateConfig, ShiftRules, merge_rate_config

__all__ = [
    "DEFAULT_RATE_CONFIG",
    "HourBreakdown",
    "NormalizedShift",
    "PayCalculator",
    "PayRates",
    "PayResult",
    "RateConfig",
    "ShiftRules",
    "ValidationResult",
    "merge_rate_config",
]
