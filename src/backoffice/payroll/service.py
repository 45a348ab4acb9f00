from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.money import to_money
from ..common.partial import pick
from ..common.validators import require_date_range, require_non_negative_amount
from ..core.enums import PayrollStatus
from ..core.exceptions import (
    ConflictError,
    DomainError,
    DuplicatePayrollError,
    EmployeeNotFoundError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    PayrollLockedError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..rules.service import RuleService
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import (
    BulkPayrollError,
    BulkPayrollResult,
    NewPayroll,
    PayrollAdjustments,
    PayrollAmounts,
    PayrollComputation,
    PayrollRecord,
    PayrollUpdate,
)
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_MONEY_FIELDS = (
    "basic_salary",
    "overtime_amount",
    "bonus",
    "allowances",
    "tax_deduction",
    "insurance_deduction",
    "other_deductions",
)


def _amount(value, field_name: str) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return to_money(require_non_negative_amount(value, field_name))


class PayrollService:
    """Payroll runs over attendance.

    Records are created as ``draft`` and move forward only
    (draft -> approved -> paid, or draft -> paid). A paid record is frozen.
    """

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        rules: RuleService,
        *,
        calculator: Optional[StandardPayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._attendance = attendance
        self._rules = rules
        self._calculator = calculator or StandardPayrollCalculator()

    def _require_employee(self, business_id: int, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id), business_id=int(business_id))
        if not employee:
            raise EmployeeNotFoundError(int(employee_id))
        return employee

    def _require_payroll(self, business_id: int, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_by_id(int(payroll_id), business_id=int(business_id))
        if not record:
            raise NotFoundError(f"Payroll record {payroll_id} not found")
        return record

    def _compute_for(self, business_id: int, employee: Employee, start: date, end: date) -> PayrollComputation:
        records = self._attendance.list_for_employee(
            employee.employee_id, start=start, end=end, business_id=int(business_id)
        )
        rule = self._rules.resolve_active_rule(business_id)
        return self._calculator.compute(
            employee,
            records,
            period_end=end,
            overtime_rate=rule.overtime_rate if rule else None,
        )

    def compute_payroll(self, business_id: int, employee_id: int, start: date, end: date) -> PayrollComputation:
        require_date_range(start, end)
        employee = self._require_employee(business_id, employee_id)
        return self._compute_for(business_id, employee, start, end)

    def create_payroll(
        self,
        business_id: int,
        employee_id: int,
        start: date,
        end: date,
        adjustments: Optional[PayrollAdjustments] = None,
    ) -> PayrollRecord:
        require_date_range(start, end)
        adjustments = adjustments or PayrollAdjustments()
        checked = {
            name: _amount(getattr(adjustments, name), name)
            for name in _MONEY_FIELDS
            if getattr(adjustments, name) is not None
        }

        employee = self._require_employee(business_id, employee_id)
        if self._payroll.exists_for_period(employee.employee_id, start, end, business_id=int(business_id)):
            logger.warning("Payroll rejected: employee %s already has %s..%s", employee_id, start, end)
            raise DuplicatePayrollError()

        computed = self._compute_for(business_id, employee, start, end)
        amounts = PayrollAmounts(
            basic_salary=checked.get("basic_salary", computed.basic_salary),
            overtime_amount=checked.get("overtime_amount", computed.overtime_amount),
            bonus=checked.get("bonus", Decimal("0.00")),
            allowances=checked.get("allowances", Decimal("0.00")),
            tax_deduction=checked.get("tax_deduction", Decimal("0.00")),
            insurance_deduction=checked.get("insurance_deduction", Decimal("0.00")),
            other_deductions=checked.get("other_deductions", Decimal("0.00")),
        )
        new = NewPayroll(
            employee_id=employee.employee_id,
            pay_period_start=start,
            pay_period_end=end,
            amounts=amounts,
            total_working_days=computed.total_working_days,
            total_present_days=computed.total_present_days,
            total_overtime_hours=computed.total_overtime_hours,
            pay_method=adjustments.pay_method,
            notes=adjustments.notes,
        )
        try:
            payroll_id = self._payroll.create(new, business_id=int(business_id))
        except ConflictError:
            raise DuplicatePayrollError()

        logger.info(
            "Payroll %s created for employee %s (%s..%s, net=%s)",
            payroll_id,
            employee_id,
            start,
            end,
            amounts.net_salary,
        )
        return self._require_payroll(business_id, payroll_id)

    def bulk_create_payroll(
        self,
        business_id: int,
        employee_ids: Iterable[int],
        start: date,
        end: date,
    ) -> BulkPayrollResult:
        """Each employee is processed on its own; failures are collected, never raised."""
        require_date_range(start, end)
        result = BulkPayrollResult()
        for employee_id in employee_ids:
            try:
                result.created.append(self.create_payroll(business_id, employee_id, start, end))
            except DomainError as e:
                logger.warning("Bulk payroll: employee %s skipped (%s: %s)", employee_id, e.kind, e.message)
                result.errors.append(BulkPayrollError(employee_id=employee_id, error=e.kind, message=e.message))

        logger.info(
            "Bulk payroll for business %s: %d created, %d failed",
            business_id,
            len(result.created),
            len(result.errors),
        )
        return result

    def update_status(
        self,
        business_id: int,
        payroll_id: int,
        new_status: PayrollStatus,
        *,
        payment_date: Optional[date] = None,
    ) -> PayrollRecord:
        new_status = PayrollStatus(new_status)
        record = self._require_payroll(business_id, payroll_id)

        if new_status.rank <= record.status.rank:
            raise InvalidTransitionError(
                f"Cannot move payroll from {record.status.value} to {new_status.value}",
                error_data={"from": record.status.value, "to": new_status.value},
            )

        if new_status == PayrollStatus.PAID:
            payment_date = payment_date or now_local().date()
        else:
            payment_date = None

        moved = self._payroll.set_status(
            record.payroll_id,
            business_id=int(business_id),
            from_status=record.status,
            to_status=new_status,
            payment_date=payment_date,
        )
        if not moved:
            self._raise_lost_race(business_id, payroll_id)

        logger.info("Payroll %s: %s -> %s", payroll_id, record.status.value, new_status.value)
        return self._require_payroll(business_id, payroll_id)

    def update_payroll(self, business_id: int, payroll_id: int, changes: PayrollUpdate) -> PayrollRecord:
        record = self._require_payroll(business_id, payroll_id)
        if record.is_paid:
            raise PayrollLockedError()

        current = record.amounts
        values = {}
        for name in _MONEY_FIELDS:
            value = pick(getattr(changes, name), getattr(current, name))
            values[name] = _amount(value, name)

        new = NewPayroll(
            employee_id=record.employee_id,
            pay_period_start=record.pay_period_start,
            pay_period_end=record.pay_period_end,
            amounts=PayrollAmounts(**values),
            total_working_days=record.total_working_days,
            total_present_days=record.total_present_days,
            total_overtime_hours=record.total_overtime_hours,
            pay_method=pick(changes.pay_method, record.pay_method),
            notes=pick(changes.notes, record.notes),
        )
        if not self._payroll.update(
            record.payroll_id, new, business_id=int(business_id), expected_status=record.status
        ):
            self._raise_lost_race(business_id, payroll_id)

        logger.info("Payroll %s updated (net=%s)", payroll_id, new.amounts.net_salary)
        return self._require_payroll(business_id, payroll_id)

    def recompute_payroll(self, business_id: int, payroll_id: int) -> PayrollRecord:
        """Refresh a draft's attendance snapshot; manual adjustments are kept."""
        record = self._require_payroll(business_id, payroll_id)
        if record.status != PayrollStatus.DRAFT:
            raise InvalidStateError(
                f"Only draft payroll can be recomputed (status is {record.status.value})",
                error_data={"status": record.status.value},
            )

        employee = self._require_employee(business_id, record.employee_id)
        computed = self._compute_for(business_id, employee, record.pay_period_start, record.pay_period_end)
        new = NewPayroll(
            employee_id=record.employee_id,
            pay_period_start=record.pay_period_start,
            pay_period_end=record.pay_period_end,
            amounts=replace(
                record.amounts,
                basic_salary=computed.basic_salary,
                overtime_amount=computed.overtime_amount,
            ),
            total_working_days=computed.total_working_days,
            total_present_days=computed.total_present_days,
            total_overtime_hours=computed.total_overtime_hours,
            pay_method=record.pay_method,
            notes=record.notes,
        )
        if not self._payroll.update(
            record.payroll_id, new, business_id=int(business_id), expected_status=PayrollStatus.DRAFT
        ):
            self._raise_lost_race(business_id, payroll_id)

        logger.info("Payroll %s recomputed from attendance", payroll_id)
        return self._require_payroll(business_id, payroll_id)

    def delete_payroll(self, business_id: int, payroll_id: int) -> None:
        record = self._require_payroll(business_id, payroll_id)
        if record.is_paid:
            raise PayrollLockedError("Cannot delete payroll that has already been paid")

        if not self._payroll.delete_unpaid(record.payroll_id, business_id=int(business_id)):
            self._raise_lost_race(business_id, payroll_id)
        logger.info("Payroll %s deleted", payroll_id)

    def get_payroll(self, business_id: int, payroll_id: int) -> PayrollRecord:
        return self._require_payroll(business_id, payroll_id)

    def list_payroll(
        self,
        business_id: int,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[PayrollRecord]:
        if start is not None and end is not None:
            require_date_range(start, end)
        return self._payroll.list_for_business(
            business_id=int(business_id),
            employee_id=employee_id,
            status=PayrollStatus(status) if status is not None else None,
            start=start,
            end=end,
        )

    def _raise_lost_race(self, business_id: int, payroll_id: int) -> None:
        """A conditional write matched nothing: report what the row looks like now."""
        current = self._require_payroll(business_id, payroll_id)
        if current.is_paid:
            raise PayrollLockedError()
        raise InvalidStateError(
            f"Payroll {payroll_id} was changed concurrently (status is {current.status.value})",
            error_data={"status": current.status.value},
        )
