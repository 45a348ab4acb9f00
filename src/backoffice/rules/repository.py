from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRule, NewAttendanceRule


class RuleRepository(Protocol):
    def get_active(self, *, business_id: int) -> Optional[AttendanceRule]:
        """Newest active rule by activation time, then creation time."""

        raise NotImplementedError

    def get_by_id(self, rule_id: int, *, business_id: int) -> Optional[AttendanceRule]:
        raise NotImplementedError

    def list_for_business(self, *, business_id: int) -> Sequence[AttendanceRule]:
        raise NotImplementedError

    def create(self, *, business_id: int, rule: NewAttendanceRule) -> int:
        raise NotImplementedError

    def activate(self, rule_id: int, *, business_id: int, activated_at: datetime) -> bool:
        """Make ``rule_id`` the only active rule of the business (one transaction)."""

        raise NotImplementedError
