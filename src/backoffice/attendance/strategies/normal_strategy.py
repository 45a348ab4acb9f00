from __future__ import annotations

from typing import Optional

from ...core.constants import DEFAULT_HALF_DAY_THRESHOLD_MINUTES
from ...core.enums import AttendanceStatus
from ...rules.model import AttendanceRule
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On time (or within grace): present unless the day was too short."""

    def decide(self, *, late_minutes: float, total_hours: float, rule: Optional[AttendanceRule]) -> StatusDecision:
        if rule is not None:
            threshold_hours = rule.half_day_threshold_hours
        else:
            threshold_hours = DEFAULT_HALF_DAY_THRESHOLD_MINUTES / 60

        if total_hours < threshold_hours:
            return StatusDecision(status=AttendanceStatus.HALF_DAY)
        return StatusDecision(status=AttendanceStatus.PRESENT)
