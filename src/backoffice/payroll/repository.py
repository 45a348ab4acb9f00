from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import NewPayroll, PayrollRecord


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int, *, business_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def exists_for_period(self, employee_id: int, start: date, end: date, *, business_id: int) -> bool:
        raise NotImplementedError

    def list_for_business(
        self,
        *,
        business_id: int,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[PayrollRecord]:
        """Newest period first. ``start``/``end`` bound the pay period."""

        raise NotImplementedError

    def create(self, record: NewPayroll, *, business_id: int) -> int:
        """Insert a draft. Raises ConflictError when the period already exists."""

        raise NotImplementedError

    def update(
        self,
        payroll_id: int,
        record: NewPayroll,
        *,
        business_id: int,
        expected_status: PayrollStatus,
    ) -> bool:
        """Rewrite amounts and counters while the row is still in ``expected_status``.

        Returns False when the row is gone or its status moved on.
        """

        raise NotImplementedError

    def set_status(
        self,
        payroll_id: int,
        *,
        business_id: int,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        payment_date: Optional[date],
    ) -> bool:
        raise NotImplementedError

    def delete_unpaid(self, payroll_id: int, *, business_id: int) -> bool:
        raise NotImplementedError
