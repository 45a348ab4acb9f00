from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import WorkSchedule
from .repository import ScheduleRepository


def _to_schedule(r: dict) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        day_of_week=int(r["day_of_week"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_weekday(
        self, *, employee_id: int, day_of_week: int, business_id: int
    ) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ws.id, ws.employee_id, ws.day_of_week, ws.start_time, ws.end_time
                FROM work_schedules ws
                JOIN employees e ON e.id = ws.employee_id
                WHERE ws.employee_id=%s AND ws.day_of_week=%s AND e.business_id=%s
                """,
                (int(employee_id), int(day_of_week), int(business_id)),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_for_employee(self, *, employee_id: int, business_id: int) -> Sequence[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ws.id, ws.employee_id, ws.day_of_week, ws.start_time, ws.end_time
                FROM work_schedules ws
                JOIN employees e ON e.id = ws.employee_id
                WHERE ws.employee_id=%s AND e.business_id=%s
                ORDER BY ws.day_of_week
                """,
                (int(employee_id), int(business_id)),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def upsert(
        self,
        *,
        employee_id: int,
        day_of_week: int,
        start_time: time,
        end_time: time,
        business_id: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_schedules(employee_id, day_of_week, start_time, end_time)
                SELECT e.id, %s, %s, %s FROM employees e WHERE e.id=%s AND e.business_id=%s
                ON DUPLICATE KEY UPDATE start_time=VALUES(start_time), end_time=VALUES(end_time)
                """,
                (int(day_of_week), start_time, end_time, int(employee_id), int(business_id)),
            )

            # If it was an update, lastrowid can be 0; fetch the id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT id FROM work_schedules WHERE employee_id=%s AND day_of_week=%s",
                (int(employee_id), int(day_of_week)),
            )
            r = fetchone(cur)
            return int(r["id"]) if r else 0

    def delete(self, *, employee_id: int, day_of_week: int, business_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE ws FROM work_schedules ws
                JOIN employees e ON e.id = ws.employee_id
                WHERE ws.employee_id=%s AND ws.day_of_week=%s AND e.business_id=%s
                """,
                (int(employee_id), int(day_of_week), int(business_id)),
            )
            return cur.rowcount > 0
