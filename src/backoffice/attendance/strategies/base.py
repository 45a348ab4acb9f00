from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ...rules.model import AttendanceRule


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we classify a worked day."""

    @abstractmethod
    def decide(self, *, late_minutes: float, total_hours: float, rule: Optional[AttendanceRule]) -> StatusDecision:
        raise NotImplementedError
