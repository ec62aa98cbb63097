"""Configuration loading helpers."""

from .loaders import load_rate_config, resolve_rate_config

__all__ = ["load_rate_config", "resolve_rate_config"]
