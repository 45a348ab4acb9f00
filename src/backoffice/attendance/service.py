from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.money import round_hours
from ..common.partial import is_set, pick
from ..common.timecalc import BreakInterval, early_departure_minutes, late_minutes, working_hours
from ..common.validators import require_date_range
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyClockedInError,
    AlreadyClockedOutError,
    ConflictError,
    DuplicateAttendanceError,
    EmployeeNotFoundError,
    NoOpenClockInError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..rules.service import RuleService
from ..schedules.repository import ScheduleRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceUpdate, DayMetrics, NewAttendance
from .overtime import OvertimeCalculator
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _time_of(value: Optional[datetime]) -> Optional[time]:
    return value.time() if value is not None else None


def _on(work_date: date, value: Optional[time]) -> Optional[datetime]:
    return datetime.combine(work_date, value) if value is not None else None


class AttendanceService:
    """Clock-in/clock-out and manual attendance.

    Status, hours and overtime are evaluated once, when the day is closed (or
    entered manually), and stored. Later rule changes do not touch existing
    records; ``update_attendance`` is the explicit way to re-evaluate one.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        rules: RuleService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        overtime: OvertimeCalculator | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._schedules = schedules
        self._rules = rules
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._overtime = overtime or OvertimeCalculator()

    def _require_employee(self, business_id: int, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id), business_id=int(business_id))
        if not employee:
            raise EmployeeNotFoundError(int(employee_id))
        return employee

    def _expected_times(self, business_id: int, employee_id: int, work_date: date):
        schedule = self._schedules.get_for_employee_and_weekday(
            employee_id=int(employee_id),
            day_of_week=work_date.weekday(),
            business_id=int(business_id),
        )
        if not schedule:
            return None, None
        return schedule.start_time, schedule.end_time

    def _evaluate(
        self,
        *,
        business_id: int,
        employee_id: int,
        work_date: date,
        clock_in: Optional[time],
        clock_out: Optional[time],
        break_interval: Optional[BreakInterval],
        is_holiday: bool,
        status_override: Optional[AttendanceStatus] = None,
        note: Optional[str] = None,
    ) -> DayMetrics:
        expected_start, expected_end = self._expected_times(business_id, employee_id, work_date)
        late = late_minutes(clock_in, expected_start)

        if clock_in is None or clock_out is None:
            # Open (or time-less) day: nothing to classify yet.
            return DayMetrics(
                total_hours=0.0,
                overtime_hours=0.0,
                late_minutes=round_hours(late),
                early_departure_minutes=0.0,
                status=status_override or AttendanceStatus.PRESENT,
                note=note,
            )

        total = working_hours(clock_in, clock_out, break_interval)
        early = early_departure_minutes(clock_out, expected_end)

        rule = self._rules.resolve_active_rule(business_id)
        overtime = self._overtime.overtime_hours(
            rule,
            total,
            is_weekend=self._overtime.is_weekend(work_date),
            is_holiday=is_holiday,
        )

        if status_override is not None:
            status, decision_note = status_override, None
        else:
            decision = self._factory.decide(late_minutes=late, total_hours=total, rule=rule)
            status, decision_note = decision.status, decision.note

        return DayMetrics(
            total_hours=round_hours(total),
            overtime_hours=round_hours(overtime),
            late_minutes=round_hours(late),
            early_departure_minutes=round_hours(early),
            status=status,
            note=note if note is not None else decision_note,
        )

    def clock_in(
        self,
        business_id: int,
        employee_id: int,
        *,
        now: datetime | None = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        self._require_employee(business_id, employee_id)

        if self._attendance.get_for_employee_and_date(int(employee_id), today, business_id=int(business_id)):
            logger.warning("Clock-in rejected: employee %s already clocked in on %s", employee_id, today)
            raise AlreadyClockedInError()

        metrics = self._evaluate(
            business_id=business_id,
            employee_id=employee_id,
            work_date=today,
            clock_in=now.time(),
            clock_out=None,
            break_interval=None,
            is_holiday=False,
            note=note,
        )
        try:
            attendance_id = self._attendance.create(
                NewAttendance(
                    employee_id=int(employee_id),
                    work_date=today,
                    check_in_time=now,
                    check_out_time=None,
                    metrics=metrics,
                ),
                business_id=int(business_id),
            )
        except ConflictError:
            # A concurrent clock-in won the unique (employee, date) key.
            raise AlreadyClockedInError()

        logger.info("Employee %s clocked in at %s", employee_id, now.isoformat())
        return self._reload(business_id, attendance_id)

    def clock_out(
        self,
        business_id: int,
        employee_id: int,
        *,
        now: datetime | None = None,
        break_interval: Optional[BreakInterval] = None,
        is_holiday: bool = False,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        self._require_employee(business_id, employee_id)

        record = self._attendance.get_for_employee_and_date(int(employee_id), today, business_id=int(business_id))
        if not record or record.check_in_time is None:
            raise NoOpenClockInError()
        if record.check_out_time is not None:
            raise AlreadyClockedOutError()

        metrics = self._evaluate(
            business_id=business_id,
            employee_id=employee_id,
            work_date=today,
            clock_in=record.check_in_time.time(),
            clock_out=now.time(),
            break_interval=break_interval,
            is_holiday=is_holiday,
            note=note if note is not None else record.note,
        )
        closed = self._attendance.complete_checkout(
            record.attendance_id,
            business_id=int(business_id),
            check_out_time=now,
            break_start_time=break_interval.start if break_interval else None,
            break_end_time=break_interval.end if break_interval else None,
            metrics=metrics,
        )
        if not closed:
            raise AlreadyClockedOutError()

        logger.info(
            "Employee %s clocked out at %s (%.2fh, status=%s)",
            employee_id,
            now.isoformat(),
            metrics.total_hours,
            metrics.status.value,
        )
        return self._reload(business_id, record.attendance_id)

    def record_manual_attendance(
        self,
        business_id: int,
        employee_id: int,
        work_date: date,
        *,
        clock_in: Optional[time] = None,
        clock_out: Optional[time] = None,
        break_interval: Optional[BreakInterval] = None,
        status_override: Optional[AttendanceStatus] = None,
        is_holiday: bool = False,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        if clock_out is not None and clock_in is None:
            raise ValidationError("clock_in is required when clock_out is given", field="clock_in")
        if clock_in is None and status_override is None:
            raise ValidationError("Either clock_in or status is required", field="clock_in")

        self._require_employee(business_id, employee_id)

        if self._attendance.get_for_employee_and_date(int(employee_id), work_date, business_id=int(business_id)):
            raise DuplicateAttendanceError()

        metrics = self._evaluate(
            business_id=business_id,
            employee_id=employee_id,
            work_date=work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            break_interval=break_interval,
            is_holiday=is_holiday,
            status_override=status_override,
            note=note,
        )
        try:
            attendance_id = self._attendance.create(
                NewAttendance(
                    employee_id=int(employee_id),
                    work_date=work_date,
                    check_in_time=_on(work_date, clock_in),
                    check_out_time=_on(work_date, clock_out),
                    metrics=metrics,
                    break_start_time=break_interval.start if break_interval else None,
                    break_end_time=break_interval.end if break_interval else None,
                ),
                business_id=int(business_id),
            )
        except ConflictError:
            raise DuplicateAttendanceError()

        logger.info("Manual attendance recorded for employee %s on %s", employee_id, work_date)
        return self._reload(business_id, attendance_id)

    def update_attendance(
        self,
        business_id: int,
        attendance_id: int,
        changes: AttendanceUpdate,
        *,
        is_holiday: bool = False,
    ) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id), business_id=int(business_id))
        if not record:
            raise NotFoundError(f"Attendance record {attendance_id} not found")

        if is_set(changes.status) and changes.status is None:
            raise ValidationError("status cannot be cleared", field="status")

        clock_in = pick(changes.check_in_time, _time_of(record.check_in_time))
        clock_out = pick(changes.check_out_time, _time_of(record.check_out_time))
        if clock_out is not None and clock_in is None:
            raise ValidationError("clock_in is required when clock_out is given", field="clock_in")

        break_interval = BreakInterval.from_optional(
            pick(changes.break_start_time, record.break_start_time),
            pick(changes.break_end_time, record.break_end_time),
        )

        if is_set(changes.status):
            status_override = changes.status
        elif clock_in is None or clock_out is None:
            status_override = record.status
        else:
            status_override = None

        metrics = self._evaluate(
            business_id=business_id,
            employee_id=record.employee_id,
            work_date=record.work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            break_interval=break_interval,
            is_holiday=is_holiday,
            status_override=status_override,
            note=pick(changes.note, record.note),
        )
        updated = self._attendance.admin_update(
            record.attendance_id,
            NewAttendance(
                employee_id=record.employee_id,
                work_date=record.work_date,
                check_in_time=_on(record.work_date, clock_in),
                check_out_time=_on(record.work_date, clock_out),
                metrics=metrics,
                break_start_time=break_interval.start if break_interval else None,
                break_end_time=break_interval.end if break_interval else None,
            ),
            business_id=int(business_id),
        )
        if not updated:
            raise NotFoundError(f"Attendance record {attendance_id} not found")

        logger.info("Attendance record %s corrected (status=%s)", attendance_id, metrics.status.value)
        return self._reload(business_id, record.attendance_id)

    def delete_attendance(self, business_id: int, attendance_id: int) -> None:
        if not self._attendance.delete(int(attendance_id), business_id=int(business_id)):
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        logger.info("Attendance record %s deleted", attendance_id)

    def get_today(self, business_id: int, employee_id: int, *, today: date | None = None) -> Optional[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.get_for_employee_and_date(int(employee_id), today, business_id=int(business_id))

    def list_attendance(self, business_id: int, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        require_date_range(start, end)
        return self._attendance.list_for_employee(int(employee_id), start=start, end=end, business_id=int(business_id))

    def _reload(self, business_id: int, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id), business_id=int(business_id))
        if not record:
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        return record
