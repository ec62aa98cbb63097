"""Command-line interface for SitterPay."""
