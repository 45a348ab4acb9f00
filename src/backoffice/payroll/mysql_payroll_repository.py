from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import NewPayroll, PayrollAmounts, PayrollRecord
from .repository import PayrollRepository

_SELECT = """
    SELECT p.id, p.employee_id, p.business_id, p.pay_period_start, p.pay_period_end,
           p.basic_salary, p.overtime_amount, p.bonus, p.allowances,
           p.tax_deduction, p.insurance_deduction, p.other_deductions,
           p.total_working_days, p.total_present_days, p.total_overtime_hours,
           p.status, p.payment_date, p.pay_method, p.notes,
           e.first_name, e.last_name
    FROM payroll p
    JOIN employees e ON e.id = p.employee_id AND e.business_id = p.business_id
"""


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        business_id=int(r["business_id"]),
        pay_period_start=r["pay_period_start"],
        pay_period_end=r["pay_period_end"],
        amounts=PayrollAmounts(
            basic_salary=as_decimal(r["basic_salary"]),
            overtime_amount=as_decimal(r["overtime_amount"]),
            bonus=as_decimal(r["bonus"]),
            allowances=as_decimal(r["allowances"]),
            tax_deduction=as_decimal(r["tax_deduction"]),
            insurance_deduction=as_decimal(r["insurance_deduction"]),
            other_deductions=as_decimal(r["other_deductions"]),
        ),
        total_working_days=int(r.get("total_working_days") or 0),
        total_present_days=int(r.get("total_present_days") or 0),
        total_overtime_hours=float(r.get("total_overtime_hours") or 0),
        status=PayrollStatus(r["status"]),
        payment_date=r.get("payment_date"),
        pay_method=r.get("pay_method"),
        notes=r.get("notes"),
        employee_name=f"{r.get('first_name') or ''} {r.get('last_name') or ''}".strip() or None,
    )


def _values(record: NewPayroll) -> tuple:
    a = record.amounts
    return (
        a.basic_salary,
        a.overtime_amount,
        a.bonus,
        a.allowances,
        a.tax_deduction,
        a.insurance_deduction,
        a.other_deductions,
        a.gross_salary,
        a.total_deductions,
        a.net_salary,
        int(record.total_working_days),
        int(record.total_present_days),
        float(record.total_overtime_hours),
        record.pay_method,
        record.notes,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int, *, business_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.id=%s AND p.business_id=%s", (int(payroll_id), int(business_id)))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def exists_for_period(self, employee_id: int, start: date, end: date, *, business_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id FROM payroll
                WHERE employee_id=%s AND pay_period_start=%s AND pay_period_end=%s AND business_id=%s
                """,
                (int(employee_id), start, end, int(business_id)),
            )
            return fetchone(cur) is not None

    def list_for_business(
        self,
        *,
        business_id: int,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[PayrollRecord]:
        where = ["p.business_id=%s"]
        params: list = [int(business_id)]
        if employee_id is not None:
            where.append("p.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            where.append("p.status=%s")
            params.append(PayrollStatus(status).value)
        if start is not None:
            where.append("p.pay_period_start >= %s")
            params.append(start)
        if end is not None:
            where.append("p.pay_period_end <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE " + " AND ".join(where) + " ORDER BY p.pay_period_end DESC, p.id DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: NewPayroll, *, business_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll (
                    employee_id, business_id, pay_period_start, pay_period_end,
                    basic_salary, overtime_amount, bonus, allowances,
                    tax_deduction, insurance_deduction, other_deductions,
                    gross_salary, total_deductions, net_salary,
                    total_working_days, total_present_days, total_overtime_hours,
                    pay_method, notes, status
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    int(record.employee_id),
                    int(business_id),
                    record.pay_period_start,
                    record.pay_period_end,
                    *_values(record),
                    PayrollStatus.DRAFT.value,
                ),
            )
            return int(cur.lastrowid)

    def update(
        self,
        payroll_id: int,
        record: NewPayroll,
        *,
        business_id: int,
        expected_status: PayrollStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll
                SET basic_salary=%s, overtime_amount=%s, bonus=%s, allowances=%s,
                    tax_deduction=%s, insurance_deduction=%s, other_deductions=%s,
                    gross_salary=%s, total_deductions=%s, net_salary=%s,
                    total_working_days=%s, total_present_days=%s, total_overtime_hours=%s,
                    pay_method=%s, notes=%s
                WHERE id=%s AND business_id=%s AND status=%s AND status <> 'paid'
                """,
                (*_values(record), int(payroll_id), int(business_id), PayrollStatus(expected_status).value),
            )
            return cur.rowcount > 0

    def set_status(
        self,
        payroll_id: int,
        *,
        business_id: int,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        payment_date: Optional[date],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll SET status=%s, payment_date=%s
                WHERE id=%s AND business_id=%s AND status=%s
                """,
                (
                    PayrollStatus(to_status).value,
                    payment_date,
                    int(payroll_id),
                    int(business_id),
                    PayrollStatus(from_status).value,
                ),
            )
            return cur.rowcount > 0

    def delete_unpaid(self, payroll_id: int, *, business_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payroll WHERE id=%s AND business_id=%s AND status <> 'paid'",
                (int(payroll_id), int(business_id)),
            )
            return cur.rowcount > 0
