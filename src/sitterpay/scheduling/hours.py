"""Allowed-hour option lists and 12-hour clock labels for shift pickers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from sitterpay.core.errors import SitterPayValueError
from sitterpay.costing.rates import ShiftRules

HOURS_PER_DAY = 24
NONE_SPECIFIED_LABEL = "None specified"

_HOUR_PATTERN = re.compile(r"^(?P<hour>\d{1,2})\s*(?P<meridiem>[ap]\.?m\.?)?$", re.IGNORECASE)


@dataclass(frozen=True)
class HourOption:
    """Selectable hour: display label plus the value handed to the calculator.

    ``value`` is ``None`` for the "None specified" bedtime entry.
    """

    label: str
    value: int | None


def allowed_hours(rules: ShiftRules) -> list[int]:
    """
    Return the normalised hours between the earliest start and the latest end (inclusive).

    When the latest end precedes the earliest start on the clock it is moved to the next day,
    so the defaults (17 and 4) yield ``[17, 18, ..., 27, 28]``.
    """

    start = rules.earliest_start_time
    end = rules.latest_end_time
    if end < start:
        end += HOURS_PER_DAY
    return list(range(start, end + 1))


def display_hour(value: int) -> str:
    """Format a (possibly normalised) hour as a 12-hour clock label, e.g. ``"9 PM"``."""

    hour = value - HOURS_PER_DAY if value >= HOURS_PER_DAY else value
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def clock_hour(value: int) -> int:
    """Map a normalised hour back onto the 0-23 clock."""

    return value % HOURS_PER_DAY


def hour_options(rules: ShiftRules, *, include_none: bool = False) -> list[HourOption]:
    """Build picker options for the allowed hours; values are plain 0-23 clock hours."""

    options = [HourOption(NONE_SPECIFIED_LABEL, None)] if include_none else []
    options.extend(HourOption(display_hour(h), clock_hour(h)) for h in allowed_hours(rules))
    return options


def parse_hour(text: str) -> int:
    """
    Parse a clock hour from user input.

    Accepts 24-hour values (``"21"``) and 12-hour values with a meridiem (``"9pm"``,
    ``"9 PM"``, ``"12 a.m."``).

    Raises
    ------
    SitterPayValueError
        If the text is not a recognisable hour.
    """

    match = _HOUR_PATTERN.match(text.strip())
    if match is None:
        raise SitterPayValueError(f"Could not parse hour '{text}' (use 0-23 or e.g. '9pm')")
    hour = int(match.group("hour"))
    meridiem = match.group("meridiem")
    if meridiem is None:
        if not 0 <= hour < HOURS_PER_DAY:
            raise SitterPayValueError(f"Hour '{text}' must be between 0 and 23")
        return hour
    if not 1 <= hour <= 12:
        raise SitterPayValueError(f"Hour '{text}' must be between 1 and 12 with AM/PM")
    hour %= 12
    if meridiem.lower().startswith("p"):
        hour += 12
    return hour


__all__ = [
    "HourOption",
    "NONE_SPECIFIED_LABEL",
    "allowed_hours",
    "clock_hour",
    "display_hour",
    "hour_options",
    "parse_hour",
]
