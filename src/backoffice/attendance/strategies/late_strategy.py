from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ...rules.model import AttendanceRule
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Arrived after the grace period.

    A rule with a half-day late penalty downgrades a short late day to half_day.
    """

    def decide(self, *, late_minutes: float, total_hours: float, rule: Optional[AttendanceRule]) -> StatusDecision:
        note = f"Late by {late_minutes:.0f} min"
        if rule is not None and rule.penalizes_late_as_half_day and total_hours < rule.half_day_threshold_hours:
            return StatusDecision(status=AttendanceStatus.HALF_DAY, note=note)
        return StatusDecision(status=AttendanceStatus.LATE, note=note)
