"""Shift scheduling helpers (allowed hours, clock labels)."""

from .hours import HourOption, allowed_hours, display_hour, hour_options, parse_hour

__all__ = ["HourOption", "allowed_hours", "display_hour", "hour_options", "parse_hour"]
