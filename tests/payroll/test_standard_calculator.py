from datetime import date
from decimal import Decimal

from backoffice.attendance.model import AttendanceRecord
from backoffice.core.enums import AttendanceStatus, SalaryType
from backoffice.payroll.calculator.standard_calculator import StandardPayrollCalculator
from fakes import make_employee

PERIOD_END = date(2025, 4, 30)  # 30-day month


def _days(n: int, *, status=AttendanceStatus.PRESENT, hours=8.0, overtime=0.0):
    return [
        AttendanceRecord(
            attendance_id=i + 1,
            employee_id=1,
            work_date=date(2025, 4, i + 1),
            check_in_time=None,
            check_out_time=None,
            status=status,
            total_hours=hours,
            overtime_hours=overtime,
        )
        for i in range(n)
    ]


def test_monthly_salary_is_prorated_by_present_days():
    employee = make_employee(salary_type=SalaryType.MONTHLY, base_salary="3000")
    result = StandardPayrollCalculator().compute(employee, _days(20), period_end=PERIOD_END)

    assert result.basic_salary == Decimal("2000.00")
    assert result.total_working_days == 20
    assert result.total_present_days == 20


def test_only_present_days_are_paid_for_daily_mode():
    employee = make_employee(salary_type=SalaryType.DAILY, base_salary="0", daily_wage="120")
    records = _days(5) + _days(2, status=AttendanceStatus.LATE)
    result = StandardPayrollCalculator().compute(employee, records, period_end=PERIOD_END)

    assert result.total_working_days == 7
    assert result.total_present_days == 5
    assert result.basic_salary == Decimal("600.00")


def test_daily_falls_back_to_base_salary():
    employee = make_employee(salary_type=SalaryType.DAILY, base_salary="100")
    result = StandardPayrollCalculator().compute(employee, _days(3), period_end=PERIOD_END)

    assert result.basic_salary == Decimal("300.00")


def test_hourly_pays_total_hours_and_overtime():
    employee = make_employee(salary_type=SalaryType.HOURLY, base_salary="0", hourly_rate="20")
    records = _days(2, hours=9.5, overtime=1.5)
    result = StandardPayrollCalculator().compute(employee, records, period_end=PERIOD_END)

    assert result.basic_salary == Decimal("380.00")
    assert result.total_overtime_hours == 3
    assert result.overtime_amount == Decimal("90.00")


def test_overtime_uses_configured_rate_and_implied_hourly_rate():
    employee = make_employee(salary_type=SalaryType.MONTHLY, base_salary="3200")
    records = _days(1, overtime=2)
    result = StandardPayrollCalculator().compute(
        employee, records, period_end=PERIOD_END, overtime_rate=Decimal("2")
    )

    # 3200 / 160 = 20 per hour
    assert result.overtime_amount == Decimal("80.00")


def test_money_rounds_half_up():
    employee = make_employee(salary_type=SalaryType.MONTHLY, base_salary="1000")
    # 1000 / 30 * 1 = 33.333...
    result = StandardPayrollCalculator().compute(employee, _days(1), period_end=PERIOD_END)

    assert result.basic_salary == Decimal("33.33")


def test_empty_period_pays_nothing():
    employee = make_employee()
    result = StandardPayrollCalculator().compute(employee, [], period_end=PERIOD_END)

    assert result.basic_salary == Decimal("0.00")
    assert result.overtime_amount == Decimal("0.00")
    assert result.total_working_days == 0
