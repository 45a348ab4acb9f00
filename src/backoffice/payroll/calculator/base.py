from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from ...attendance.model import AttendanceRecord
from ...common.money import round_hours
from ...core.enums import AttendanceStatus
from ...employees.model import Employee


@dataclass(frozen=True)
class AttendanceSummary:
    total_working_days: int
    total_present_days: int
    total_overtime_hours: float
    total_hours: float

    @classmethod
    def from_records(cls, records: Iterable[AttendanceRecord]) -> "AttendanceSummary":
        records = list(records)
        return cls(
            total_working_days=len(records),
            total_present_days=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
            total_overtime_hours=round_hours(sum(r.overtime_hours or 0.0 for r in records)),
            total_hours=round_hours(sum(r.total_hours or 0.0 for r in records)),
        )


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern, one per salary mode)."""

    @abstractmethod
    def basic_salary(self, employee: Employee, summary: AttendanceSummary, *, period_end: date) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def overtime_hourly_rate(self, employee: Employee) -> Decimal:
        """Hourly rate the overtime multiplier applies to."""

        raise NotImplementedError
