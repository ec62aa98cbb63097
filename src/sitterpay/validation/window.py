"""Warnings for shifts that fall outside the configured working window."""

from __future__ import annotations

from typing import List

from sitterpay.costing.rates import ShiftRules
from sitterpay.scheduling.hours import allowed_hours, clock_hour, display_hour


def validate_shift_window(
    *,
    start: int,
    end: int,
    bed: int | None,
    rules: ShiftRules,
) -> list[str]:
    """Return warnings when shift hours fall outside the earliest-start/latest-end window."""

    window = {clock_hour(h) for h in allowed_hours(rules)}
    first = display_hour(rules.earliest_start_time)
    last = display_hour(rules.latest_end_time)
    warnings: List[str] = []
    if start not in window:
        warnings.append(f"Start {display_hour(start)} outside allowed window [{first}, {last}]")
    if end not in window:
        warnings.append(f"End {display_hour(end)} outside allowed window [{first}, {last}]")
    if bed is not None and bed not in window:
        warnings.append(f"Bedtime {display_hour(bed)} outside allowed window [{first}, {last}]")
    return warnings


__all__ = ["validate_shift_window"]
