"""Price many shifts at once from a CSV table."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from sitterpay.core.errors import SitterPayValueError
from sitterpay.costing.calculator import PayCalculator

REQUIRED_COLUMNS = ("start_hour", "end_hour")
OPTIONAL_COLUMNS = ("bed_hour",)
RESULT_COLUMNS = (
    "pre_bedtime_hours",
    "bedtime_to_midnight_hours",
    "midnight_to_end_hours",
    "pay",
    "success",
    "message",
)


def read_shifts_csv(path: str | Path) -> pd.DataFrame:
    """
    Load a shift table (``start_hour``, ``end_hour`` and optional ``bed_hour`` columns).

    Raises
    ------
    SitterPayValueError
        If a required column is missing.
    """

    frame = pd.read_csv(path)
    missing = [column for column in REQUIRED_COLUMNS if column not in frame.columns]
    if missing:
        raise SitterPayValueError(f"Shift table {path} missing required columns: {missing}")
    if "bed_hour" not in frame.columns:
        frame["bed_hour"] = pd.NA
    return frame


def _hour(value: Any) -> Any:
    # Keep non-numeric cells as-is so the calculator rejects them as out-of-range hours.
    if pd.isna(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    return int(number) if number.is_integer() else number


def price_shifts(calculator: PayCalculator, frame: pd.DataFrame) -> pd.DataFrame:
    """
    Price each row of ``frame`` and return the table with the result columns appended.

    Rows the calculator rejects keep zero hours and pay, ``success=False`` and the validation
    message; they never abort the batch.
    """

    records: list[dict[str, Any]] = []
    for row in frame.itertuples(index=False):
        start = _hour(getattr(row, "start_hour"))
        end = _hour(getattr(row, "end_hour"))
        bed = _hour(getattr(row, "bed_hour", None))
        result = calculator.calc(start, end, bed)
        hours = result.hours.to_dict() if result.hours is not None else {}
        records.append(
            {
                "pre_bedtime_hours": hours.get("pre_bedtime", 0),
                "bedtime_to_midnight_hours": hours.get("bedtime_to_midnight", 0),
                "midnight_to_end_hours": hours.get("midnight_to_end", 0),
                "pay": float(result.pay),
                "success": result.success,
                "message": result.message,
            }
        )
    results = pd.DataFrame.from_records(records, columns=list(RESULT_COLUMNS))
    return pd.concat([frame.reset_index(drop=True), results], axis=1)


def summarize_batch(priced: pd.DataFrame) -> dict[str, float | int]:
    """Return headline counts and totals for a priced shift table."""

    ok = priced[priced["success"].astype(bool)] if len(priced) else priced
    total_hours = 0
    if len(ok):
        total_hours = int(
            ok["pre_bedtime_hours"].sum()
            + ok["bedtime_to_midnight_hours"].sum()
            + ok["midnight_to_end_hours"].sum()
        )
    return {
        "shifts": int(len(priced)),
        "priced": int(len(ok)),
        "failed": int(len(priced) - len(ok)),
        "total_hours": total_hours,
        "total_pay": float(ok["pay"].sum()) if len(ok) else 0.0,
    }


__all__ = [
    "OPTIONAL_COLUMNS",
    "REQUIRED_COLUMNS",
    "RESULT_COLUMNS",
    "price_shifts",
    "read_shifts_csv",
    "summarize_batch",
]
