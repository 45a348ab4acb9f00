from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Optional

from ..core.constants import DEFAULT_WEEKEND_DAYS
from ..rules.model import AttendanceRule


@dataclass(frozen=True)
class OvertimeCalculator:
    """Overtime hours for one day. Currency amounts are the payroll's job."""

    weekend_days: FrozenSet[int] = field(default=DEFAULT_WEEKEND_DAYS)

    def is_weekend(self, day: date) -> bool:
        return day.weekday() in self.weekend_days

    def overtime_hours(
        self,
        rule: Optional[AttendanceRule],
        total_hours: float,
        *,
        is_weekend: bool,
        is_holiday: bool,
    ) -> float:
        # No policy, no overtime.
        if rule is None:
            return 0.0

        if (is_weekend and rule.weekend_overtime) or (is_holiday and rule.holiday_overtime):
            return total_hours

        return max(0.0, total_hours - rule.overtime_threshold_hours)
