"""Rate table and shift rules consumed by the pay calculator."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sitterpay.core.errors import SitterPayValueError


class ShiftRules(BaseModel):
    """Clock window in which a babysitting shift may take place.

    Attributes
    ----------
    earliest_start_time:
        Earliest hour (0-23) a shift may start. Hours numerically smaller than this value are
        treated as belonging to the following day when shifts are normalised.
    latest_end_time:
        Latest hour (0-23) a shift may end. Only used to build the allowed-hour lists and
        window warnings; pricing never rejects a late end.
    """

    model_config = ConfigDict(frozen=True)

    earliest_start_time: int = 17  # 5pm
    latest_end_time: int = 4  # 4am

    @field_validator("earliest_start_time", "latest_end_time")
    @classmethod
    def _clock_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError("Shift rule hours must be between 0 and 23")
        return value


class PayRates(BaseModel):
    """Hourly rates for the three billing buckets of a shift.

    Attributes
    ----------
    start_to_bedtime:
        Rate from the start of the shift until bedtime.
    bedtime_to_midnight:
        Rate from bedtime until midnight.
    midnight_to_end:
        Rate from midnight until the end of the shift.
    """

    model_config = ConfigDict(frozen=True)

    start_to_bedtime: float = 12.0
    bedtime_to_midnight: float = 8.0
    midnight_to_end: float = 16.0

    @field_validator("start_to_bedtime", "bedtime_to_midnight", "midnight_to_end")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Hourly rates must be non-negative")
        return value


class RateConfig(BaseModel):
    """Immutable calculator configuration (shift rules + pay rates)."""

    model_config = ConfigDict(frozen=True)

    rules: ShiftRules = Field(default_factory=ShiftRules)
    pay_rate: PayRates = Field(default_factory=PayRates)


DEFAULT_RATE_CONFIG = RateConfig()

KEY_SYNONYMS = {
    "pay_rates": "pay_rate",
    "rates": "pay_rate",
    "rule": "rules",
    "bed_time_to_midnight": "bedtime_to_midnight",
    "start_to_bed_time": "start_to_bedtime",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_config_key(key: str) -> str:
    """
    Normalise a configuration key into the snake-case field names used by ``RateConfig``.

    CamelCase keys (``earliestStartTime``, ``bedTimeToMidnight``) and dashed keys
    (``midnight-to-end``) are accepted so configuration written for other front ends can be
    reused without edits.
    """

    stripped = _CAMEL_BOUNDARY.sub("_", str(key).strip()).lower()
    slug = re.sub(r"[^\w]+", "_", stripped).strip("_")
    return KEY_SYNONYMS.get(slug, slug)


def _section_fields(config: RateConfig) -> dict[str, dict[str, Any]]:
    return {
        "rules": config.rules.model_dump(),
        "pay_rate": config.pay_rate.model_dump(),
    }


def _build_config(sections: Mapping[str, Mapping[str, Any]]) -> RateConfig:
    try:
        return RateConfig(
            rules=ShiftRules(**sections["rules"]),
            pay_rate=PayRates(**sections["pay_rate"]),
        )
    except ValidationError as exc:
        raise SitterPayValueError(f"Invalid rate configuration: {exc}") from exc


def merge_rate_config(
    base: RateConfig, overrides: Mapping[str, Any] | RateConfig | None
) -> RateConfig:
    """
    Return ``base`` with ``overrides`` applied section by section, key by key.

    Parameters
    ----------
    base:
        Configuration providing every value not present in ``overrides``.
    overrides:
        Partial configuration such as ``{"pay_rate": {"midnight_to_end": 20}}``. Each key present
        replaces the matching leaf of ``base``; sections are merged, never replaced wholesale.
        A full ``RateConfig`` is returned as-is.

    Raises
    ------
    SitterPayValueError
        If a section or field is unknown, a section is not a mapping, or a value fails validation.
    """

    if overrides is None:
        return base
    if isinstance(overrides, RateConfig):
        return overrides
    if not isinstance(overrides, Mapping):
        raise SitterPayValueError(
            f"Rate configuration overrides must be a mapping (got {type(overrides).__name__})"
        )

    sections = _section_fields(base)
    for raw_section, values in overrides.items():
        section = normalize_config_key(raw_section)
        if section not in sections:
            known = ", ".join(sorted(sections))
            raise SitterPayValueError(
                f"Unknown configuration section '{raw_section}'. Valid sections: {known}"
            )
        if values is None:
            continue
        if not isinstance(values, Mapping):
            raise SitterPayValueError(f"Configuration section '{raw_section}' must be a mapping")
        current = sections[section]
        for raw_field, value in values.items():
            field = normalize_config_key(raw_field)
            if field not in current:
                known = ", ".join(sorted(current))
                raise SitterPayValueError(
                    f"Unknown field '{raw_field}' in section '{section}'. Valid fields: {known}"
                )
            current[field] = value
    return _build_config(sections)


def expand_flat_overrides(flat: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """
    Group flat ``field -> value`` overrides under their configuration section.

    ``{"midnight_to_end": 20, "earliest_start_time": 18}`` becomes
    ``{"pay_rate": {"midnight_to_end": 20}, "rules": {"earliest_start_time": 18}}``.
    """

    owners = {
        field: section
        for section, fields in _section_fields(DEFAULT_RATE_CONFIG).items()
        for field in fields
    }
    grouped: dict[str, dict[str, Any]] = {}
    for raw_field, value in flat.items():
        field = normalize_config_key(raw_field)
        section = owners.get(field)
        if section is None:
            known = ", ".join(sorted(owners))
            raise SitterPayValueError(f"Unknown rate setting '{raw_field}'. Valid settings: {known}")
        grouped.setdefault(section, {})[field] = value
    return grouped


__all__ = [
    "DEFAULT_RATE_CONFIG",
    "KEY_SYNONYMS",
    "PayRates",
    "RateConfig",
    "ShiftRules",
    "expand_flat_overrides",
    "merge_rate_config",
    "normalize_config_key",
]
