from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import SalaryType


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee and how they are paid.

    ``salary_type`` decides which rate is authoritative for payroll math; the
    other rate fields are advisory fallbacks.
    """

    employee_id: int
    business_id: int
    first_name: str
    last_name: str
    salary_type: SalaryType
    base_salary: Decimal
    daily_wage: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    employee_code: Optional[str] = None
    status: str = "active"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
