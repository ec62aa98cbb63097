"""Split a babysitting shift into rate buckets and price it."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sitterpay.costing.rates import DEFAULT_RATE_CONFIG, RateConfig, merge_rate_config

MIDNIGHT_HOUR = 24
HOURS_PER_DAY = 24

INVALID_RANGE_MESSAGE = "End time cannot be earler than start time."
OUT_OF_RANGE_MESSAGE = "Hours must be whole numbers between 0 and 23."


@dataclass(frozen=True)
class ValidationResult:
    success: bool
    message: str = ""


@dataclass(frozen=True)
class NormalizedShift:
    """Shift hours on a single increasing scale.

    ``end`` and ``bed`` are shifted by 24 when they fall before the earliest allowed start,
    i.e. after midnight on the following day. ``start`` is never shifted.
    """

    start: int
    end: int
    bed: int


@dataclass(frozen=True)
class HourBreakdown:
    """Billable hours per rate bucket."""

    pre_bedtime: int = 0
    bedtime_to_midnight: int = 0
    midnight_to_end: int = 0

    @property
    def total(self) -> int:
        return self.pre_bedtime + self.bedtime_to_midnight + self.midnight_to_end

    def to_dict(self) -> dict[str, int]:
        return {
            "pre_bedtime": self.pre_bedtime,
            "bedtime_to_midnight": self.bedtime_to_midnight,
            "midnight_to_end": self.midnight_to_end,
        }


@dataclass(frozen=True)
class PayResult:
    """Outcome of :meth:`PayCalculator.calc`.

    Attributes
    ----------
    success:
        ``False`` when the hours were rejected; ``pay`` is then 0 and ``hours`` is ``None``.
    message:
        Validation error, or the human-readable breakdown (``"3h@$12 +  3h@$8 + 3h@$16"``).
    pay:
        Total pay across the three buckets.
    hours:
        Hours per bucket for successful calculations.
    """

    success: bool
    message: str
    pay: float = 0
    hours: HourBreakdown | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "pay": self.pay,
            "hours": self.hours.to_dict() if self.hours is not None else {},
        }


def format_amount(value: float) -> str:
    """Render whole numbers without a trailing ``.0`` (``12`` rather than ``12.0``)."""

    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _is_clock_hour(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < HOURS_PER_DAY


def _all_clock_hours(start: Any, end: Any, bed: Any = None) -> bool:
    hours = [start, end] if bed is None else [start, end, bed]
    return all(_is_clock_hour(hour) for hour in hours)


def _pre_bedtime_hours(shift: NormalizedShift) -> int:
    if shift.bed <= shift.start:
        return 0
    # Pre-bedtime billing stops at whichever comes first: end of shift, bedtime, midnight.
    upper = min(shift.end, shift.bed, MIDNIGHT_HOUR)
    return max(upper - shift.start, 0)


def _bedtime_to_midnight_hours(shift: NormalizedShift) -> int:
    if shift.bed >= MIDNIGHT_HOUR or shift.end <= shift.bed:
        return 0
    lower = max(shift.bed, shift.start)
    upper = min(shift.end, MIDNIGHT_HOUR)
    return max(upper - lower, 0)


def _midnight_to_end_hours(shift: NormalizedShift) -> int:
    if shift.end <= MIDNIGHT_HOUR:
        return 0
    if shift.start > MIDNIGHT_HOUR:
        return shift.end - shift.start
    return shift.end - MIDNIGHT_HOUR


class PayCalculator:
    """
    Babysitting pay calculator.

    Parameters
    ----------
    config:
        Full ``RateConfig`` or a partial mapping merged over ``DEFAULT_RATE_CONFIG`` (for example
        ``{"pay_rate": {"midnight_to_end": 20}}``). ``None`` uses the defaults.

    Notes
    -----
    The calculator only holds read-only configuration, so a single instance can be shared
    between callers.
    """

    def __init__(self, config: RateConfig | Mapping[str, Any] | None = None) -> None:
        self._config = merge_rate_config(DEFAULT_RATE_CONFIG, config)

    @property
    def config(self) -> RateConfig:
        return self._config

    def validate_hours(
        self, start: int, end: int, bed: int | None = None
    ) -> ValidationResult:
        """
        Check raw clock hours; only start/end ordering and the 0-23 range are enforced.

        Ordering is compared on the clock as given, so a shift ending after midnight
        (``validate_hours(18, 3)``) is rejected here. ``calc`` compares the normalised
        shift instead; see ``validate_shift``.
        """

        if not _all_clock_hours(start, end, bed):
            return ValidationResult(success=False, message=OUT_OF_RANGE_MESSAGE)
        if end < start:
            return ValidationResult(success=False, message=INVALID_RANGE_MESSAGE)
        return ValidationResult(success=True)

    def validate_shift(self, shift: NormalizedShift) -> ValidationResult:
        """Reject a normalised shift that still ends before it starts."""

        if shift.end < shift.start:
            return ValidationResult(success=False, message=INVALID_RANGE_MESSAGE)
        return ValidationResult(success=True)

    def normalize(self, start: int, end: int, bed: int | None = None) -> NormalizedShift:
        """Move ``end``/``bed`` past midnight when they precede the earliest allowed start."""

        if bed is None:
            bed = 0
        earliest = self._config.rules.earliest_start_time
        return NormalizedShift(
            start=start,
            end=end + HOURS_PER_DAY if end < earliest else end,
            bed=bed + HOURS_PER_DAY if bed < earliest else bed,
        )

    def partition(self, shift: NormalizedShift) -> HourBreakdown:
        """Split a normalised shift into the three rate buckets."""

        return HourBreakdown(
            pre_bedtime=_pre_bedtime_hours(shift),
            bedtime_to_midnight=_bedtime_to_midnight_hours(shift),
            midnight_to_end=_midnight_to_end_hours(shift),
        )

    def calc_hours(self, start: int, end: int, bed: int | None = None) -> HourBreakdown:
        return self.partition(self.normalize(start, end, bed))

    def calc(self, start: int, end: int, bed: int | None = None) -> PayResult:
        """
        Price a shift given raw clock hours.

        Returns
        -------
        PayResult
            ``success=False`` with the validation message when the hours are rejected; otherwise
            the total pay, the per-bucket hours, and a breakdown message.

        Notes
        -----
        Start/end ordering is checked after normalisation, so ``calc(18, 3, 21)`` prices a
        shift running past midnight while ``calc(18, 17)`` is still rejected.
        """

        if not _all_clock_hours(start, end, bed):
            return PayResult(success=False, message=OUT_OF_RANGE_MESSAGE)
        shift = self.normalize(start, end, bed)
        validation = self.validate_shift(shift)
        if not validation.success:
            return PayResult(success=False, message=validation.message)

        hours = self.partition(shift)
        rates = self._config.pay_rate
        pay = (
            hours.pre_bedtime * rates.start_to_bedtime
            + hours.bedtime_to_midnight * rates.bedtime_to_midnight
            + hours.midnight_to_end * rates.midnight_to_end
        )
        # The double space after the first "+" is part of the established message format.
        message = (
            f"{hours.pre_bedtime}h@${format_amount(rates.start_to_bedtime)} +  "
            f"{hours.bedtime_to_midnight}h@${format_amount(rates.bedtime_to_midnight)} + "
            f"{hours.midnight_to_end}h@${format_amount(rates.midnight_to_end)}"
        )
        return PayResult(success=True, message=message, pay=pay, hours=hours)


__all__ = [
    "HourBreakdown",
    "INVALID_RANGE_MESSAGE",
    "MIDNIGHT_HOUR",
    "NormalizedShift",
    "OUT_OF_RANGE_MESSAGE",
    "PayCalculator",
    "PayResult",
    "ValidationResult",
    "format_amount",
]
