from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, DayMetrics, NewAttendance
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.id, a.employee_id, a.work_date, a.check_in_time, a.check_out_time,
           a.break_start_time, a.break_end_time, a.total_hours, a.overtime_hours,
           a.late_minutes, a.early_departure_minutes, a.status, a.note
    FROM attendance a
    JOIN employees e ON e.id = a.employee_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        total_hours=float(r.get("total_hours") or 0),
        overtime_hours=float(r.get("overtime_hours") or 0),
        late_minutes=float(r.get("late_minutes") or 0),
        early_departure_minutes=float(r.get("early_departure_minutes") or 0),
        break_start_time=normalize_mysql_time(r.get("break_start_time")),
        break_end_time=normalize_mysql_time(r.get("break_end_time")),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int, *, business_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.id=%s AND e.business_id=%s",
                (int(attendance_id), int(business_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(
        self, employee_id: int, work_date: date, *, business_id: int
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.employee_id=%s AND a.work_date=%s AND e.business_id=%s",
                (int(employee_id), work_date, int(business_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(
        self, employee_id: int, *, start: date, end: date, business_id: int
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE a.employee_id=%s AND e.business_id=%s AND a.work_date BETWEEN %s AND %s
                ORDER BY a.work_date ASC
                """,
                (int(employee_id), int(business_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: NewAttendance, *, business_id: int) -> int:
        m = record.metrics
        with db_cursor(self._conn_factory) as (_, cur):
            # INSERT ... SELECT keeps the tenant check and the write in one statement.
            cur.execute(
                """
                INSERT INTO attendance(
                    employee_id, work_date, check_in_time, check_out_time,
                    break_start_time, break_end_time, total_hours, overtime_hours,
                    late_minutes, early_departure_minutes, status, note
                )
                SELECT e.id, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                FROM employees e
                WHERE e.id=%s AND e.business_id=%s
                """,
                (
                    record.work_date,
                    record.check_in_time,
                    record.check_out_time,
                    record.break_start_time,
                    record.break_end_time,
                    m.total_hours,
                    m.overtime_hours,
                    m.late_minutes,
                    m.early_departure_minutes,
                    m.status.value,
                    m.note,
                    int(record.employee_id),
                    int(business_id),
                ),
            )
            return int(cur.lastrowid or 0)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance a
                JOIN employees e ON e.id = a.employee_id
                SET a.check_out_time=%s, a.break_start_time=%s, a.break_end_time=%s,
                    a.total_hours=%s, a.overtime_hours=%s, a.early_departure_minutes=%s,
                    a.status=%s, a.note=%s
                WHERE a.id=%s AND e.business_id=%s AND a.check_out_time IS NULL
                """,
                (
                    check_out_time,
                    break_start_time,
                    break_end_time,
                    metrics.total_hours,
                    metrics.overtime_hours,
                    metrics.early_departure_minutes,
                    metrics.status.value,
                    metrics.note,
                    int(attendance_id),
                    int(business_id),
                ),
            )
            return cur.rowcount > 0

    def admin_update(self, attendance_id: int, record: NewAttendance, *, business_id: int) -> bool:
        m = record.metrics
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance a
                JOIN employees e ON e.id = a.employee_id
                SET a.check_in_time=%s, a.check_out_time=%s, a.break_start_time=%s, a.break_end_time=%s,
                    a.total_hours=%s, a.overtime_hours=%s, a.late_minutes=%s,
                    a.early_departure_minutes=%s, a.status=%s, a.note=%s
                WHERE a.id=%s AND e.business_id=%s
                """,
                (
                    record.check_in_time,
                    record.check_out_time,
                    record.break_start_time,
                    record.break_end_time,
                    m.total_hours,
                    m.overtime_hours,
                    m.late_minutes,
                    m.early_departure_minutes,
                    m.status.value,
                    m.note,
                    int(attendance_id),
                    int(business_id),
                ),
            )
            # rowcount is 0 when nothing changed, so check existence separately.
            if cur.rowcount > 0:
                return True
            cur.execute(
                "SELECT a.id FROM attendance a JOIN employees e ON e.id = a.employee_id WHERE a.id=%s AND e.business_id=%s",
                (int(attendance_id), int(business_id)),
            )
            return fetchone(cur) is not None

    def delete(self, attendance_id: int, *, business_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE a FROM attendance a
                JOIN employees e ON e.id = a.employee_id
                WHERE a.id=%s AND e.business_id=%s
                """,
                (int(attendance_id), int(business_id)),
            )
            return cur.rowcount > 0
