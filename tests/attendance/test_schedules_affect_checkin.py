from datetime import date, datetime, time

from backoffice.core.enums import AttendanceStatus
from backoffice.rules.model import NewAttendanceRule
from fakes import build_fake_container, make_employee

MONDAY = date(2025, 3, 3)


def _container(**rule_kwargs):
    c = build_fake_container(make_employee(1))
    c.rule_service.create_rule(1, NewAttendanceRule(rule_name="Standard", **rule_kwargs), activate=True)
    c.schedule_service.set_schedule(
        business_id=1, employee_id=1, day_of_week=0, start_time=time(8, 0), end_time=time(17, 0)
    )
    return c


def test_schedule_makes_late_arrival_late():
    c = _container(late_grace_period=30, half_day_threshold=240, overtime_threshold=480)
    svc = c.attendance_service

    svc.clock_in(1, 1, now=datetime.combine(MONDAY, time(8, 45)))
    rec = svc.clock_out(1, 1, now=datetime.combine(MONDAY, time(13, 45)))

    assert rec.late_minutes == 45
    assert rec.total_hours == 5
    assert rec.status == AttendanceStatus.LATE
    assert rec.early_departure_minutes == 195


def test_half_day_penalty_applies_to_short_late_day():
    c = _container(late_grace_period=30, half_day_threshold=240, late_penalty_type="half_day")
    svc = c.attendance_service

    svc.clock_in(1, 1, now=datetime.combine(MONDAY, time(8, 45)))
    rec = svc.clock_out(1, 1, now=datetime.combine(MONDAY, time(11, 45)))

    assert rec.status == AttendanceStatus.HALF_DAY


def test_day_without_schedule_has_no_lateness():
    c = _container(late_grace_period=30)
    svc = c.attendance_service
    tuesday = date(2025, 3, 4)

    svc.clock_in(1, 1, now=datetime.combine(tuesday, time(11, 0)))
    rec = svc.clock_out(1, 1, now=datetime.combine(tuesday, time(19, 0)))

    assert rec.late_minutes == 0
    assert rec.early_departure_minutes == 0
    assert rec.status == AttendanceStatus.PRESENT
