"""Core utilities shared across SitterPay modules."""

from .errors import SitterPayValueError

__all__ = ["SitterPayValueError"]
