"""Rate configuration loading utilities (YAML)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from sitterpay.core.errors import SitterPayValueError
from sitterpay.costing.rates import DEFAULT_RATE_CONFIG, RateConfig, merge_rate_config

__all__ = ["load_rate_config", "resolve_rate_config"]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise SitterPayValueError(f"Could not parse rate configuration {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SitterPayValueError(f"Rate configuration {path} must contain a mapping at the top level")
    return data


def load_rate_config(yaml_path: str | Path, base: RateConfig | None = None) -> RateConfig:
    """Load a rate configuration YAML and merge it over ``base``.

    Parameters
    ----------
    yaml_path:
        File with optional ``rules`` and ``pay_rate`` sections, e.g.::

            rules:
              earliest_start_time: 18
            pay_rate:
              midnight_to_end: 20

        Keys written in camelCase (``payRate``, ``bedTimeToMidnight``) are accepted too.
    base:
        Configuration supplying unspecified values. Defaults to ``DEFAULT_RATE_CONFIG``.

    Raises
    ------
    FileNotFoundError
        If ``yaml_path`` does not exist.
    SitterPayValueError
        If the YAML is malformed or contains unknown sections, fields, or invalid values.
    """

    path = Path(yaml_path)
    if not path.exists():
        raise FileNotFoundError(path)
    return merge_rate_config(base or DEFAULT_RATE_CONFIG, _read_yaml(path))


def resolve_rate_config(
    yaml_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> RateConfig:
    """Combine defaults, an optional YAML file, and sectioned overrides (highest precedence)."""

    config = DEFAULT_RATE_CONFIG
    if yaml_path is not None:
        config = load_rate_config(yaml_path, base=config)
    if overrides:
        config = merge_rate_config(config, overrides)
    return config
