from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from ..common.money import to_money
from ..common.partial import UNSET
from ..core.enums import PayrollStatus

ZERO = Decimal("0.00")


def _money_str(value: Decimal) -> str:
    return str(to_money(value))


@dataclass(frozen=True)
class PayrollComputation:
    """Attendance aggregated over a pay period, priced by salary mode."""

    basic_salary: Decimal
    overtime_amount: Decimal
    total_working_days: int
    total_present_days: int
    total_overtime_hours: float
    total_hours: float = 0.0

    def to_dict(self) -> dict:
        return {
            "basic_salary": _money_str(self.basic_salary),
            "overtime_amount": _money_str(self.overtime_amount),
            "total_working_days": self.total_working_days,
            "total_present_days": self.total_present_days,
            "total_overtime_hours": self.total_overtime_hours,
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class PayrollAdjustments:
    """Manual additions and deductions entered with a payroll run.

    ``basic_salary`` / ``overtime_amount`` replace the computed figures when
    given (manual entry instead of auto-calculation).
    """

    bonus: Decimal = ZERO
    allowances: Decimal = ZERO
    tax_deduction: Decimal = ZERO
    insurance_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO
    basic_salary: Optional[Decimal] = None
    overtime_amount: Optional[Decimal] = None
    pay_method: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PayrollAmounts:
    basic_salary: Decimal
    overtime_amount: Decimal
    bonus: Decimal = ZERO
    allowances: Decimal = ZERO
    tax_deduction: Decimal = ZERO
    insurance_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO

    @property
    def gross_salary(self) -> Decimal:
        return to_money(self.basic_salary + self.overtime_amount + self.bonus + self.allowances)

    @property
    def total_deductions(self) -> Decimal:
        return to_money(self.tax_deduction + self.insurance_deduction + self.other_deductions)

    @property
    def net_salary(self) -> Decimal:
        return to_money(self.gross_salary - self.total_deductions)


@dataclass(frozen=True)
class NewPayroll:
    employee_id: int
    pay_period_start: date
    pay_period_end: date
    amounts: PayrollAmounts
    total_working_days: int
    total_present_days: int
    total_overtime_hours: float
    pay_method: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one employee's pay for one period.

    Attendance counters are a snapshot taken when the record was created (or
    explicitly recomputed), not a live view.
    """

    payroll_id: int
    employee_id: int
    business_id: int
    pay_period_start: date
    pay_period_end: date
    amounts: PayrollAmounts
    total_working_days: int
    total_present_days: int
    total_overtime_hours: float
    status: PayrollStatus
    payment_date: Optional[date] = None
    pay_method: Optional[str] = None
    notes: Optional[str] = None
    employee_name: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == PayrollStatus.PAID

    def to_dict(self) -> dict:
        a = self.amounts
        return {
            "id": self.payroll_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "pay_period_start": self.pay_period_start.isoformat(),
            "pay_period_end": self.pay_period_end.isoformat(),
            "basic_salary": _money_str(a.basic_salary),
            "overtime_amount": _money_str(a.overtime_amount),
            "bonus": _money_str(a.bonus),
            "allowances": _money_str(a.allowances),
            "tax_deduction": _money_str(a.tax_deduction),
            "insurance_deduction": _money_str(a.insurance_deduction),
            "other_deductions": _money_str(a.other_deductions),
            "gross_salary": _money_str(a.gross_salary),
            "total_deductions": _money_str(a.total_deductions),
            "net_salary": _money_str(a.net_salary),
            "total_working_days": self.total_working_days,
            "total_present_days": self.total_present_days,
            "total_overtime_hours": self.total_overtime_hours,
            "status": self.status.value,
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
            "pay_method": self.pay_method,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class PayrollUpdate:
    """Partial update of an unpaid record. Each field is UNSET, None or a value.

    ``None`` on a money field resets it to zero.
    """

    basic_salary: Optional[Decimal] = UNSET
    overtime_amount: Optional[Decimal] = UNSET
    bonus: Optional[Decimal] = UNSET
    allowances: Optional[Decimal] = UNSET
    tax_deduction: Optional[Decimal] = UNSET
    insurance_deduction: Optional[Decimal] = UNSET
    other_deductions: Optional[Decimal] = UNSET
    pay_method: Optional[str] = UNSET
    notes: Optional[str] = UNSET


@dataclass(frozen=True)
class BulkPayrollError:
    employee_id: int
    error: str
    message: str

    def to_dict(self) -> dict:
        return {"employee_id": self.employee_id, "error": self.error, "message": self.message}


@dataclass
class BulkPayrollResult:
    created: List[PayrollRecord] = field(default_factory=list)
    errors: List[BulkPayrollError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "created": [r.to_dict() for r in self.created],
            "errors": [e.to_dict() for e in self.errors],
        }
