from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int, *, business_id: int) -> Optional[Employee]:
        """Return the employee only when it belongs to ``business_id``."""

        raise NotImplementedError
