"""CLI helper utilities for SitterPay."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import typer

from sitterpay.config import resolve_rate_config
from sitterpay.core.errors import SitterPayValueError
from sitterpay.costing.rates import RateConfig, expand_flat_overrides
from sitterpay.scheduling.hours import parse_hour

RATE_ALIASES: dict[str, str] = {
    "pre_bedtime": "start_to_bedtime",
    "pre-bedtime": "start_to_bedtime",
    "evening": "start_to_bedtime",
    "bedtime": "bedtime_to_midnight",
    "after_bedtime": "bedtime_to_midnight",
    "midnight": "midnight_to_end",
    "overnight": "midnight_to_end",
    "earliest_start": "earliest_start_time",
    "latest_end": "latest_end_time",
}

RATE_SETTING_DESCRIPTIONS: dict[str, str] = {
    "start_to_bedtime": "Hourly rate from shift start until bedtime.",
    "bedtime_to_midnight": "Hourly rate from bedtime until midnight.",
    "midnight_to_end": "Hourly rate from midnight until the end of the shift.",
    "earliest_start_time": "Earliest start hour (0-23); earlier end/bed hours roll to the next day.",
    "latest_end_time": "Latest end hour (0-23) offered by `sitterpay hours`.",
}


def parse_rate_overrides(rate_args: Sequence[str] | None) -> dict[str, float]:
    """Parse ``name=value`` rate strings into a dictionary (aliases resolved)."""
    overrides: dict[str, float] = {}
    if not rate_args:
        return overrides
    for arg in rate_args:
        if "=" not in arg:
            raise ValueError(f"Rate override must be in name=value format (got '{arg}')")
        name, raw_value = arg.split("=", 1)
        name = name.strip()
        if not name:
            raise ValueError(f"Rate override missing setting name in '{arg}'")
        try:
            value = float(raw_value)
        except ValueError as exc:
            raise ValueError(
                f"Rate override for '{name}' must be numeric (got '{raw_value}')"
            ) from exc
        key = name.lower()
        overrides[RATE_ALIASES.get(key, key)] = value
    return overrides


def rate_setting_help() -> str:
    """Return a help string listing the rate settings accepted by ``--rate``."""
    lines = [f"{name}: {desc}" for name, desc in RATE_SETTING_DESCRIPTIONS.items()]
    aliases = ", ".join(f"{alias}->{target}" for alias, target in sorted(RATE_ALIASES.items()))
    return "Settings:\n" + "\n".join(lines) + f"\nAliases: {aliases}"


def build_rate_config(config_path: Path | None, rate_args: Sequence[str] | None) -> RateConfig:
    """Resolve the effective configuration, turning user errors into ``typer.BadParameter``."""
    try:
        flat = parse_rate_overrides(rate_args)
        return resolve_rate_config(config_path, expand_flat_overrides(flat))
    except (ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def parse_hour_argument(value: str | None, label: str) -> int | None:
    """Parse an hour CLI argument, raising ``typer.BadParameter`` with the parameter label."""
    if value is None:
        return None
    try:
        return parse_hour(value)
    except SitterPayValueError as exc:
        raise typer.BadParameter(f"{label}: {exc}") from exc


__all__ = [
    "RATE_ALIASES",
    "RATE_SETTING_DESCRIPTIONS",
    "build_rate_config",
    "parse_hour_argument",
    "parse_rate_overrides",
    "rate_setting_help",
]
