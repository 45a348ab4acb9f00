from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.partial import UNSET
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class DayMetrics:
    """Everything derived from a day's clock times, computed once and stored."""

    total_hours: float
    overtime_hours: float
    late_minutes: float
    early_departure_minutes: float
    status: AttendanceStatus
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar date."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    total_hours: float = 0.0
    overtime_hours: float = 0.0
    late_minutes: float = 0.0
    early_departure_minutes: float = 0.0
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "break_start_time": self.break_start_time.isoformat() if self.break_start_time else None,
            "break_end_time": self.break_end_time.isoformat() if self.break_end_time else None,
            "total_hours": self.total_hours,
            "overtime_hours": self.overtime_hours,
            "late_minutes": self.late_minutes,
            "early_departure_minutes": self.early_departure_minutes,
            "status": self.status.value,
            "note": self.note,
        }


@dataclass(frozen=True)
class NewAttendance:
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    metrics: DayMetrics
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None


@dataclass(frozen=True)
class AttendanceUpdate:
    """Administrative correction. Each field is UNSET, None or a value."""

    check_in_time: Optional[time] = UNSET
    check_out_time: Optional[time] = UNSET
    break_start_time: Optional[time] = UNSET
    break_end_time: Optional[time] = UNSET
    status: Optional[AttendanceStatus] = UNSET
    note: Optional[str] = UNSET
