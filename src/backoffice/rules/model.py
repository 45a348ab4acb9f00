from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import (
    DEFAULT_HALF_DAY_THRESHOLD_MINUTES,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_OVERTIME_RATE,
    DEFAULT_STANDARD_DAY_MINUTES,
)
from ..core.enums import LatePenaltyType


@dataclass(frozen=True)
class NewAttendanceRule:
    rule_name: str
    late_grace_period: Optional[int] = None
    late_penalty_type: str = LatePenaltyType.NONE.value
    half_day_threshold: Optional[int] = None
    overtime_threshold: Optional[int] = None
    overtime_rate: Decimal = DEFAULT_OVERTIME_RATE
    weekend_overtime: bool = False
    holiday_overtime: bool = False


@dataclass(frozen=True)
class AttendanceRule:
    """A business's attendance policy. All thresholds are in minutes.

    Nullable thresholds fall back to the documented defaults through the
    ``*_hours`` / ``grace_minutes`` accessors.
    """

    rule_id: int
    business_id: int
    rule_name: str
    late_grace_period: Optional[int]
    late_penalty_type: str
    half_day_threshold: Optional[int]
    overtime_threshold: Optional[int]
    overtime_rate: Decimal
    weekend_overtime: bool
    holiday_overtime: bool
    is_active: bool
    created_at: datetime
    activated_at: Optional[datetime] = None

    @property
    def grace_minutes(self) -> float:
        if self.late_grace_period is None:
            return DEFAULT_LATE_GRACE_MINUTES
        return self.late_grace_period

    @property
    def half_day_threshold_hours(self) -> float:
        minutes = self.half_day_threshold
        if minutes is None:
            minutes = DEFAULT_HALF_DAY_THRESHOLD_MINUTES
        return minutes / 60

    @property
    def overtime_threshold_hours(self) -> float:
        minutes = self.overtime_threshold
        if minutes is None:
            minutes = DEFAULT_STANDARD_DAY_MINUTES
        return minutes / 60

    @property
    def penalizes_late_as_half_day(self) -> bool:
        return self.late_penalty_type == LatePenaltyType.HALF_DAY.value

    def to_dict(self) -> dict:
        return {
            "id": self.rule_id,
            "rule_name": self.rule_name,
            "late_grace_period": self.late_grace_period,
            "late_penalty_type": self.late_penalty_type,
            "half_day_threshold": self.half_day_threshold,
            "overtime_threshold": self.overtime_threshold,
            "overtime_rate": str(self.overtime_rate),
            "weekend_overtime": self.weekend_overtime,
            "holiday_overtime": self.holiday_overtime,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "activated_at": self.activated_at.isoformat() if self.activated_at else None,
        }
