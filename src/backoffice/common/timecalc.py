"""Wall-clock arithmetic for attendance.

All differences are taken on a fixed reference date so that two time-of-day
values compare the same way regardless of the day they were recorded on.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError

REFERENCE_DATE = date(1970, 1, 1)


def _on_reference(value: time) -> datetime:
    return datetime.combine(REFERENCE_DATE, value.replace(tzinfo=None))


def minutes_between(start: time, end: time) -> float:
    """Signed minutes from ``start`` to ``end``."""
    return (_on_reference(end) - _on_reference(start)).total_seconds() / 60


@dataclass(frozen=True)
class BreakInterval:
    start: time
    end: time

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError("Break end cannot be earlier than break start", field="break_end")

    @property
    def minutes(self) -> float:
        return minutes_between(self.start, self.end)

    @classmethod
    def from_optional(cls, start: Optional[time], end: Optional[time]) -> Optional["BreakInterval"]:
        # A half-specified break is ignored, both ends are required.
        if start is None or end is None:
            return None
        return cls(start=start, end=end)


def working_hours(
    clock_in: Optional[time],
    clock_out: Optional[time],
    break_interval: Optional[BreakInterval] = None,
) -> float:
    """Elapsed hours minus the break, never below zero. Missing clock-out gives 0."""
    if clock_in is None or clock_out is None:
        return 0.0
    if clock_out < clock_in:
        raise ValidationError("Clock-out time cannot be earlier than clock-in time", field="clock_out")

    minutes = minutes_between(clock_in, clock_out)
    if break_interval is not None:
        if break_interval.start < clock_in or break_interval.end > clock_out:
            raise ValidationError("Break must fall between clock-in and clock-out", field="break_start")
        minutes -= break_interval.minutes
    return max(0.0, minutes / 60)


def late_minutes(actual: Optional[time], expected: Optional[time]) -> float:
    if actual is None or expected is None:
        return 0.0
    return max(0.0, minutes_between(expected, actual))


def early_departure_minutes(actual: Optional[time], expected: Optional[time]) -> float:
    if actual is None or expected is None:
        return 0.0
    return max(0.0, minutes_between(actual, expected))
