"""Common SitterPay-specific exceptions."""

class SitterPayValueError(ValueError):
    """Raised when SitterPay detects invalid user-provided configuration or data."""


__all__ = ["SitterPayValueError"]
