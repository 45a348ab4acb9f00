from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import days_in_month
from ...common.money import to_money
from ...core.constants import DEFAULT_OVERTIME_RATE, STANDARD_MONTHLY_HOURS
from ...core.enums import SalaryType
from ...employees.model import Employee
from ..model import PayrollComputation
from .base import AttendanceSummary, SalaryCalculator


def _hours(value: float) -> Decimal:
    return Decimal(str(value))


class MonthlySalaryCalculator(SalaryCalculator):
    """Base salary pro-rated over the calendar month containing the period end."""

    def basic_salary(self, employee: Employee, summary: AttendanceSummary, *, period_end: date) -> Decimal:
        per_day = employee.base_salary / days_in_month(period_end)
        return per_day * summary.total_present_days

    def overtime_hourly_rate(self, employee: Employee) -> Decimal:
        return employee.hourly_rate or (employee.base_salary / STANDARD_MONTHLY_HOURS)


class DailySalaryCalculator(SalaryCalculator):
    def basic_salary(self, employee: Employee, summary: AttendanceSummary, *, period_end: date) -> Decimal:
        return (employee.daily_wage or employee.base_salary) * summary.total_present_days

    def overtime_hourly_rate(self, employee: Employee) -> Decimal:
        return employee.hourly_rate or (employee.base_salary / STANDARD_MONTHLY_HOURS)


class HourlySalaryCalculator(SalaryCalculator):
    def basic_salary(self, employee: Employee, summary: AttendanceSummary, *, period_end: date) -> Decimal:
        return self.overtime_hourly_rate(employee) * _hours(summary.total_hours)

    def overtime_hourly_rate(self, employee: Employee) -> Decimal:
        return employee.hourly_rate or employee.base_salary


class StandardPayrollCalculator:
    """Prices a period of attendance for one employee.

    Basic salary comes from the employee's salary mode; overtime is
    ``hourly rate x overtime rate x overtime hours``. Money is rounded
    half-up to cents.
    """

    def __init__(self, calculators: Optional[Dict[SalaryType, SalaryCalculator]] = None):
        self._calculators = calculators or {
            SalaryType.MONTHLY: MonthlySalaryCalculator(),
            SalaryType.DAILY: DailySalaryCalculator(),
            SalaryType.HOURLY: HourlySalaryCalculator(),
        }

    def for_employee(self, employee: Employee) -> SalaryCalculator:
        return self._calculators[SalaryType(employee.salary_type)]

    def compute(
        self,
        employee: Employee,
        records: Iterable[AttendanceRecord],
        *,
        period_end: date,
        overtime_rate: Optional[Decimal] = None,
    ) -> PayrollComputation:
        summary = AttendanceSummary.from_records(records)
        calculator = self.for_employee(employee)
        rate = overtime_rate if overtime_rate is not None else DEFAULT_OVERTIME_RATE

        basic = calculator.basic_salary(employee, summary, period_end=period_end)
        overtime = calculator.overtime_hourly_rate(employee) * rate * _hours(summary.total_overtime_hours)

        return PayrollComputation(
            basic_salary=to_money(basic),
            overtime_amount=to_money(overtime),
            total_working_days=summary.total_working_days,
            total_present_days=summary.total_present_days,
            total_overtime_hours=summary.total_overtime_hours,
            total_hours=summary.total_hours,
        )
