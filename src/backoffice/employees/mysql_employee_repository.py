from __future__ import annotations

from typing import Optional

from ..core.enums import SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_optional_decimal, db_cursor, fetchone
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int, *, business_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, business_id, employee_code, first_name, last_name,
                       salary_type, base_salary, daily_wage, hourly_rate, status
                FROM employees
                WHERE id=%s AND business_id=%s
                """,
                (int(employee_id), int(business_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Employee(
                employee_id=int(r["id"]),
                business_id=int(r["business_id"]),
                first_name=r["first_name"],
                last_name=r.get("last_name") or "",
                salary_type=SalaryType(r["salary_type"]),
                base_salary=as_decimal(r["base_salary"]),
                daily_wage=as_optional_decimal(r.get("daily_wage")),
                hourly_rate=as_optional_decimal(r.get("hourly_rate")),
                employee_code=r.get("employee_code"),
                status=r.get("status") or "active",
            )
