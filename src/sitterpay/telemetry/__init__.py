"""Telemetry helpers (JSONL run records)."""

from .jsonl import append_jsonl, read_jsonl
from .run_logger import RunTelemetryLogger

__all__ = ["RunTelemetryLogger", "append_jsonl", "read_jsonl"]
