"""In-memory repositories used by the service and endpoint tests.

Each fake keeps the same business scoping as the MySQL implementation: a row
owned by another business is invisible.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from backoffice.attendance.model import AttendanceRecord, DayMetrics, NewAttendance
from backoffice.charity.model import (
    CharityPayment,
    CharityRecord,
    CharitySummary,
    IncomeMeta,
    IncomeRecord,
    derive_charity_status,
)
from backoffice.container import wire
from backoffice.core.enums import CharityStatus, PayrollStatus, SalaryType
from backoffice.core.exceptions import ConflictError
from backoffice.employees.model import Employee
from backoffice.payroll.model import NewPayroll, PayrollRecord
from backoffice.rules.model import AttendanceRule, NewAttendanceRule
from backoffice.schedules.model import WorkSchedule


def make_employee(
    employee_id: int = 1,
    *,
    business_id: int = 1,
    salary_type: SalaryType = SalaryType.MONTHLY,
    base_salary: str = "3000",
    daily_wage: Optional[str] = None,
    hourly_rate: Optional[str] = None,
) -> Employee:
    return Employee(
        employee_id=employee_id,
        business_id=business_id,
        first_name="Ada",
        last_name=f"Worker{employee_id}",
        salary_type=salary_type,
        base_salary=Decimal(base_salary),
        daily_wage=Decimal(daily_wage) if daily_wage is not None else None,
        hourly_rate=Decimal(hourly_rate) if hourly_rate is not None else None,
    )


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._by_id = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._by_id[employee.employee_id] = employee

    def get_by_id(self, employee_id: int, *, business_id: int) -> Optional[Employee]:
        e = self._by_id.get(employee_id)
        return e if e and e.business_id == business_id else None

    def business_of(self, employee_id: int) -> Optional[int]:
        e = self._by_id.get(employee_id)
        return e.business_id if e else None


class InMemoryRules:
    def __init__(self):
        self._rules: dict[int, AttendanceRule] = {}
        self._id = 0
        self._clock = 0

    def _tick(self) -> datetime:
        # Strictly increasing creation times.
        self._clock += 1
        return datetime(2025, 1, 1) + timedelta(seconds=self._clock)

    def get_active(self, *, business_id: int) -> Optional[AttendanceRule]:
        active = [r for r in self._rules.values() if r.business_id == business_id and r.is_active]
        if not active:
            return None
        active.sort(
            key=lambda r: (r.activated_at is not None, r.activated_at or datetime.min, r.created_at, r.rule_id),
            reverse=True,
        )
        return active[0]

    def get_by_id(self, rule_id: int, *, business_id: int) -> Optional[AttendanceRule]:
        r = self._rules.get(rule_id)
        return r if r and r.business_id == business_id else None

    def list_for_business(self, *, business_id: int):
        return sorted(
            (r for r in self._rules.values() if r.business_id == business_id),
            key=lambda r: r.created_at,
            reverse=True,
        )

    def create(self, *, business_id: int, rule: NewAttendanceRule) -> int:
        self._id += 1
        self._rules[self._id] = AttendanceRule(
            rule_id=self._id,
            business_id=business_id,
            rule_name=rule.rule_name,
            late_grace_period=rule.late_grace_period,
            late_penalty_type=rule.late_penalty_type,
            half_day_threshold=rule.half_day_threshold,
            overtime_threshold=rule.overtime_threshold,
            overtime_rate=Decimal(rule.overtime_rate),
            weekend_overtime=rule.weekend_overtime,
            holiday_overtime=rule.holiday_overtime,
            is_active=False,
            created_at=self._tick(),
        )
        return self._id

    def activate(self, rule_id: int, *, business_id: int, activated_at: datetime) -> bool:
        if not self.get_by_id(rule_id, business_id=business_id):
            return False
        for rid, r in list(self._rules.items()):
            if r.business_id != business_id:
                continue
            if rid == rule_id:
                self._rules[rid] = replace(r, is_active=True, activated_at=activated_at)
            else:
                self._rules[rid] = replace(r, is_active=False)
        return True


class InMemorySchedules:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: dict[tuple[int, int], WorkSchedule] = {}
        self._id = 0

    def _owned(self, employee_id: int, business_id: int) -> bool:
        return self._employees.business_of(employee_id) == business_id

    def get_for_employee_and_weekday(self, *, employee_id: int, day_of_week: int, business_id: int):
        if not self._owned(employee_id, business_id):
            return None
        return self._rows.get((employee_id, day_of_week))

    def list_for_employee(self, *, employee_id: int, business_id: int):
        if not self._owned(employee_id, business_id):
            return []
        return sorted(
            (s for (eid, _), s in self._rows.items() if eid == employee_id),
            key=lambda s: s.day_of_week,
        )

    def upsert(self, *, employee_id: int, day_of_week: int, start_time: time, end_time: time, business_id: int) -> int:
        existing = self._rows.get((employee_id, day_of_week))
        if existing:
            schedule_id = existing.schedule_id
        else:
            self._id += 1
            schedule_id = self._id
        self._rows[(employee_id, day_of_week)] = WorkSchedule(
            schedule_id=schedule_id,
            employee_id=employee_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
        )
        return schedule_id

    def delete(self, *, employee_id: int, day_of_week: int, business_id: int) -> bool:
        if not self._owned(employee_id, business_id):
            return False
        return self._rows.pop((employee_id, day_of_week), None) is not None


def _record(attendance_id: int, new: NewAttendance) -> AttendanceRecord:
    m = new.metrics
    return AttendanceRecord(
        attendance_id=attendance_id,
        employee_id=new.employee_id,
        work_date=new.work_date,
        check_in_time=new.check_in_time,
        check_out_time=new.check_out_time,
        status=m.status,
        total_hours=m.total_hours,
        overtime_hours=m.overtime_hours,
        late_minutes=m.late_minutes,
        early_departure_minutes=m.early_departure_minutes,
        break_start_time=new.break_start_time,
        break_end_time=new.break_end_time,
        note=m.note,
    )


class InMemoryAttendance:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _visible(self, r: Optional[AttendanceRecord], business_id: int) -> Optional[AttendanceRecord]:
        if r and self._employees.business_of(r.employee_id) == business_id:
            return r
        return None

    def get_by_id(self, attendance_id: int, *, business_id: int):
        return self._visible(self._rows.get(attendance_id), business_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date, *, business_id: int):
        for r in self._rows.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return self._visible(r, business_id)
        return None

    def list_for_employee(self, employee_id: int, *, start: date, end: date, business_id: int):
        rows = [
            r
            for r in self._rows.values()
            if r.employee_id == employee_id and start <= r.work_date <= end and self._visible(r, business_id)
        ]
        return sorted(rows, key=lambda r: r.work_date)

    def create(self, record: NewAttendance, *, business_id: int) -> int:
        if self._employees.business_of(record.employee_id) != business_id:
            raise ConflictError("Employee not found")
        for r in self._rows.values():
            if r.employee_id == record.employee_id and r.work_date == record.work_date:
                raise ConflictError("Record already exists")
        self._id += 1
        self._rows[self._id] = _record(self._id, record)
        return self._id

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
        r = self.get_by_id(attendance_id, business_id=business_id)
        if not r or r.check_out_time is not None:
            return False
        self._rows[attendance_id] = replace(
            r,
            check_out_time=check_out_time,
            break_start_time=break_start_time,
            break_end_time=break_end_time,
            status=metrics.status,
            total_hours=metrics.total_hours,
            overtime_hours=metrics.overtime_hours,
            late_minutes=metrics.late_minutes,
            early_departure_minutes=metrics.early_departure_minutes,
            note=metrics.note,
        )
        return True

    def admin_update(self, attendance_id: int, record: NewAttendance, *, business_id: int) -> bool:
        if not self.get_by_id(attendance_id, business_id=business_id):
            return False
        self._rows[attendance_id] = _record(attendance_id, record)
        return True

    def delete(self, attendance_id: int, *, business_id: int) -> bool:
        if not self.get_by_id(attendance_id, business_id=business_id):
            return False
        del self._rows[attendance_id]
        return True

    def put(self, record: AttendanceRecord) -> None:
        """Seed a stored record directly."""
        self._id = max(self._id, record.attendance_id)
        self._rows[record.attendance_id] = record


class InMemoryPayroll:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: dict[int, PayrollRecord] = {}
        self._id = 0

    def get_by_id(self, payroll_id: int, *, business_id: int):
        r = self._rows.get(payroll_id)
        return r if r and r.business_id == business_id else None

    def exists_for_period(self, employee_id: int, start: date, end: date, *, business_id: int) -> bool:
        return any(
            r.employee_id == employee_id
            and r.pay_period_start == start
            and r.pay_period_end == end
            and r.business_id == business_id
            for r in self._rows.values()
        )

    def list_for_business(self, *, business_id: int, employee_id=None, status=None, start=None, end=None):
        rows = [r for r in self._rows.values() if r.business_id == business_id]
        if employee_id is not None:
            rows = [r for r in rows if r.employee_id == employee_id]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        if start is not None:
            rows = [r for r in rows if r.pay_period_start >= start]
        if end is not None:
            rows = [r for r in rows if r.pay_period_end <= end]
        return sorted(rows, key=lambda r: (r.pay_period_end, r.payroll_id), reverse=True)

    def create(self, record: NewPayroll, *, business_id: int) -> int:
        if any(
            r.employee_id == record.employee_id
            and r.pay_period_start == record.pay_period_start
            and r.pay_period_end == record.pay_period_end
            for r in self._rows.values()
        ):
            raise ConflictError("Record already exists")
        self._id += 1
        self._rows[self._id] = PayrollRecord(
            payroll_id=self._id,
            employee_id=record.employee_id,
            business_id=business_id,
            pay_period_start=record.pay_period_start,
            pay_period_end=record.pay_period_end,
            amounts=record.amounts,
            total_working_days=record.total_working_days,
            total_present_days=record.total_present_days,
            total_overtime_hours=record.total_overtime_hours,
            status=PayrollStatus.DRAFT,
            pay_method=record.pay_method,
            notes=record.notes,
        )
        return self._id

    def update(self, payroll_id: int, record: NewPayroll, *, business_id: int, expected_status: PayrollStatus) -> bool:
        r = self.get_by_id(payroll_id, business_id=business_id)
        if not r or r.status != expected_status or r.is_paid:
            return False
        self._rows[payroll_id] = replace(
            r,
            amounts=record.amounts,
            total_working_days=record.total_working_days,
            total_present_days=record.total_present_days,
            total_overtime_hours=record.total_overtime_hours,
            pay_method=record.pay_method,
            notes=record.notes,
        )
        return True

    def set_status(self, payroll_id: int, *, business_id: int, from_status, to_status, payment_date) -> bool:
        r = self.get_by_id(payroll_id, business_id=business_id)
        if not r or r.status != from_status:
            return False
        self._rows[payroll_id] = replace(r, status=to_status, payment_date=payment_date)
        return True

    def delete_unpaid(self, payroll_id: int, *, business_id: int) -> bool:
        r = self.get_by_id(payroll_id, business_id=business_id)
        if not r or r.is_paid:
            return False
        del self._rows[payroll_id]
        return True

    def count(self) -> int:
        return len(self._rows)


class InMemoryCharity:
    def __init__(self):
        self.incomes: dict[int, IncomeRecord] = {}
        self.charities: dict[int, CharityRecord] = {}
        self.payments: dict[int, CharityPayment] = {}
        self._ids = {"income": 0, "charity": 0, "payment": 0}

    def _next(self, kind: str) -> int:
        self._ids[kind] += 1
        return self._ids[kind]

    def get_income(self, income_id: int, *, business_id: int):
        r = self.incomes.get(income_id)
        return r if r and r.business_id == business_id else None

    def get_charity(self, charity_id: int, *, business_id: int):
        r = self.charities.get(charity_id)
        return r if r and r.business_id == business_id else None

    def get_charity_for_income(self, income_id: int, *, business_id: int):
        for c in self.charities.values():
            if c.income_id == income_id and c.business_id == business_id:
                return c
        return None

    def list_charity(self, *, business_id: int, status=None):
        rows = [c for c in self.charities.values() if c.business_id == business_id]
        if status is not None:
            rows = [c for c in rows if c.status == status]
        return sorted(rows, key=lambda c: c.charity_id, reverse=True)

    def create_income_with_charity(
        self,
        *,
        business_id: int,
        amount: Decimal,
        income_date: date,
        meta: IncomeMeta,
        amount_required: Decimal,
        charity_description: Optional[str],
    ):
        income_id = self._next("income")
        self.incomes[income_id] = IncomeRecord(
            income_id=income_id,
            business_id=business_id,
            amount=amount,
            income_date=income_date,
            description=meta.description,
            category_id=meta.category_id,
            source=meta.source,
        )
        charity_id = self._next("charity")
        self.charities[charity_id] = CharityRecord(
            charity_id=charity_id,
            business_id=business_id,
            income_id=income_id,
            amount_required=amount_required,
            amount_paid=Decimal("0.00"),
            status=CharityStatus.PENDING,
            description=charity_description,
        )
        return income_id, charity_id

    def update_income_with_charity(
        self,
        income_id: int,
        *,
        business_id: int,
        amount: Decimal,
        income_date: date,
        meta: IncomeMeta,
        amount_required: Decimal,
    ) -> bool:
        income = self.get_income(income_id, business_id=business_id)
        if not income:
            return False
        self.incomes[income_id] = replace(
            income,
            amount=amount,
            income_date=income_date,
            description=meta.description,
            category_id=meta.category_id,
            source=meta.source,
        )
        charity = self.get_charity_for_income(income_id, business_id=business_id)
        self.charities[charity.charity_id] = replace(
            charity,
            amount_required=amount_required,
            status=derive_charity_status(amount_required, charity.amount_paid),
        )
        return True

    def delete_income(self, income_id: int, *, business_id: int) -> bool:
        if not self.get_income(income_id, business_id=business_id):
            return False
        charity = self.get_charity_for_income(income_id, business_id=business_id)
        if charity:
            for pid in [p.payment_id for p in self.payments.values() if p.charity_id == charity.charity_id]:
                del self.payments[pid]
            del self.charities[charity.charity_id]
        del self.incomes[income_id]
        return True

    def record_payment(
        self,
        charity_id: int,
        *,
        business_id: int,
        expected_paid: Decimal,
        expected_required: Decimal,
        new_paid: Decimal,
        new_status: CharityStatus,
        amount: Decimal,
        payment_date: date,
        recipient: Optional[str],
        description: Optional[str],
    ):
        charity = self.get_charity(charity_id, business_id=business_id)
        if not charity or charity.amount_paid != expected_paid or charity.amount_required != expected_required:
            return None
        self.charities[charity_id] = replace(
            charity,
            amount_paid=new_paid,
            status=new_status,
            recipient=recipient or charity.recipient,
            description=description or charity.description,
        )
        payment_id = self._next("payment")
        self.payments[payment_id] = CharityPayment(
            payment_id=payment_id,
            charity_id=charity_id,
            amount=amount,
            payment_date=payment_date,
            recipient=recipient,
            description=description,
        )
        return payment_id

    def list_payments(self, charity_id: int, *, business_id: int):
        if not self.get_charity(charity_id, business_id=business_id):
            return []
        return sorted(
            (p for p in self.payments.values() if p.charity_id == charity_id),
            key=lambda p: (p.payment_date, p.payment_id),
        )

    def summary(self, *, business_id: int) -> CharitySummary:
        rows = [c for c in self.charities.values() if c.business_id == business_id]
        return CharitySummary(
            total_required=sum((c.amount_required for c in rows), Decimal("0")),
            total_paid=sum((c.amount_paid for c in rows), Decimal("0")),
        )


def build_fake_container(*employees: Employee, charity_rate: str = "0.025"):
    employees_repo = InMemoryEmployees(*employees)
    return wire(
        employees_repo=employees_repo,
        rules_repo=InMemoryRules(),
        schedules_repo=InMemorySchedules(employees_repo),
        attendance_repo=InMemoryAttendance(employees_repo),
        payroll_repo=InMemoryPayroll(employees_repo),
        charity_repo=InMemoryCharity(),
        charity_rate=Decimal(charity_rate),
    )


def make_rule(
    *,
    rule_id: int = 1,
    business_id: int = 1,
    late_grace_period: Optional[int] = 30,
    late_penalty_type: str = "none",
    half_day_threshold: Optional[int] = 240,
    overtime_threshold: Optional[int] = 480,
    overtime_rate: str = "1.5",
    weekend_overtime: bool = False,
    holiday_overtime: bool = False,
) -> AttendanceRule:
    return AttendanceRule(
        rule_id=rule_id,
        business_id=business_id,
        rule_name="Standard",
        late_grace_period=late_grace_period,
        late_penalty_type=late_penalty_type,
        half_day_threshold=half_day_threshold,
        overtime_threshold=overtime_threshold,
        overtime_rate=Decimal(overtime_rate),
        weekend_overtime=weekend_overtime,
        holiday_overtime=holiday_overtime,
        is_active=True,
        created_at=datetime(2025, 1, 1),
        activated_at=datetime(2025, 1, 1),
    )
