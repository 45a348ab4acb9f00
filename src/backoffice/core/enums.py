from __future__ import annotations

from enum import Enum


class SalaryType(str, Enum):
    """Compensation mode authoritative for payroll math."""

    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"


class AttendanceStatus(str, Enum):
    """Day classification stored on an attendance record."""

    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half_day"
    ABSENT = "absent"
    ON_LEAVE = "on_leave"


class LatePenaltyType(str, Enum):
    NONE = "none"
    HALF_DAY = "half_day"


class PayrollStatus(str, Enum):
    """Payroll lifecycle. Order matters: a record only ever moves forward."""

    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"

    @property
    def rank(self) -> int:
        return _PAYROLL_ORDER.index(self)


_PAYROLL_ORDER = [PayrollStatus.DRAFT, PayrollStatus.APPROVED, PayrollStatus.PAID]


class CharityStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
