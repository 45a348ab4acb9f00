from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, DayMetrics, NewAttendance


class AttendanceRepository(Protocol):
    """Attendance rows are owned through their employee's business."""

    def get_by_id(self, attendance_id: int, *, business_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(
        self, employee_id: int, work_date: date, *, business_id: int
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(
        self, employee_id: int, *, start: date, end: date, business_id: int
    ) -> Sequence[AttendanceRecord]:
        """Records with ``start <= work_date <= end``, oldest first."""

        raise NotImplementedError

    def create(self, record: NewAttendance, *, business_id: int) -> int:
        """Insert a record. Raises ConflictError when (employee, date) exists."""

        raise NotImplementedError

    def complete_checkout(
        self,
        attendance_id: int,
        *,
        business_id: int,
        check_out_time: datetime,
        break_start_time: Optional[time],
        break_end_time: Optional[time],
        metrics: DayMetrics,
    ) -> bool:
        """Close an open record. Returns False when it was already closed."""

        raise NotImplementedError

    def admin_update(self, attendance_id: int, record: NewAttendance, *, business_id: int) -> bool:
        """Admin-only correction of every stored field."""

        raise NotImplementedError

    def delete(self, attendance_id: int, *, business_id: int) -> bool:
        raise NotImplementedError
