from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import AttendanceRule, NewAttendanceRule
from .repository import RuleRepository

_COLUMNS = """
    id, business_id, rule_name, late_grace_period, late_penalty_type,
    half_day_threshold, overtime_threshold, overtime_rate,
    weekend_overtime, holiday_overtime, is_active, activated_at, created_at
"""


def _to_rule(r: dict) -> AttendanceRule:
    return AttendanceRule(
        rule_id=int(r["id"]),
        business_id=int(r["business_id"]),
        rule_name=r["rule_name"],
        late_grace_period=r.get("late_grace_period"),
        late_penalty_type=r.get("late_penalty_type") or "none",
        half_day_threshold=r.get("half_day_threshold"),
        overtime_threshold=r.get("overtime_threshold"),
        overtime_rate=as_decimal(r.get("overtime_rate")),
        weekend_overtime=bool(r.get("weekend_overtime")),
        holiday_overtime=bool(r.get("holiday_overtime")),
        is_active=bool(r.get("is_active")),
        activated_at=r.get("activated_at"),
        created_at=r["created_at"],
    )


class MySQLRuleRepository(RuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self, *, business_id: int) -> Optional[AttendanceRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_rules
                WHERE business_id=%s AND is_active=1
                ORDER BY activated_at IS NULL, activated_at DESC, created_at DESC, id DESC
                LIMIT 1
                """,
                (int(business_id),),
            )
            r = fetchone(cur)
            return _to_rule(r) if r else None

    def get_by_id(self, rule_id: int, *, business_id: int) -> Optional[AttendanceRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_rules WHERE id=%s AND business_id=%s",
                (int(rule_id), int(business_id)),
            )
            r = fetchone(cur)
            return _to_rule(r) if r else None

    def list_for_business(self, *, business_id: int) -> Sequence[AttendanceRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_rules WHERE business_id=%s ORDER BY created_at DESC",
                (int(business_id),),
            )
            return [_to_rule(r) for r in fetchall(cur)]

    def create(self, *, business_id: int, rule: NewAttendanceRule) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_rules(
                    business_id, rule_name, late_grace_period, late_penalty_type,
                    half_day_threshold, overtime_threshold, overtime_rate,
                    weekend_overtime, holiday_overtime, is_active
                ) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,0)
                """,
                (
                    int(business_id),
                    rule.rule_name,
                    rule.late_grace_period,
                    rule.late_penalty_type,
                    rule.half_day_threshold,
                    rule.overtime_threshold,
                    rule.overtime_rate,
                    int(rule.weekend_overtime),
                    int(rule.holiday_overtime),
                ),
            )
            return int(cur.lastrowid)

    def activate(self, rule_id: int, *, business_id: int, activated_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Lock the tenant's rule rows so two activations cannot interleave.
            cur.execute(
                "SELECT id FROM attendance_rules WHERE business_id=%s FOR UPDATE",
                (int(business_id),),
            )
            ids = {int(r["id"]) for r in fetchall(cur)}
            if int(rule_id) not in ids:
                return False

            cur.execute(
                "UPDATE attendance_rules SET is_active=0 WHERE business_id=%s AND id<>%s",
                (int(business_id), int(rule_id)),
            )
            cur.execute(
                "UPDATE attendance_rules SET is_active=1, activated_at=%s WHERE id=%s AND business_id=%s",
                (activated_at, int(rule_id), int(business_id)),
            )
            return True
