from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..rules.model import AttendanceRule
from .strategies.base import AttendanceStrategy, StatusDecision
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the status strategy from lateness and the rule."""

    def for_day(self, *, late_minutes: float, rule: Optional[AttendanceRule]) -> AttendanceStrategy:
        grace = rule.grace_minutes if rule is not None else DEFAULT_LATE_GRACE_MINUTES
        if late_minutes > grace:
            return LateStrategy()
        return NormalStrategy()

    def decide(self, *, late_minutes: float, total_hours: float, rule: Optional[AttendanceRule]) -> StatusDecision:
        strategy = self.for_day(late_minutes=late_minutes, rule=rule)
        return strategy.decide(late_minutes=late_minutes, total_hours=total_hours, rule=rule)
