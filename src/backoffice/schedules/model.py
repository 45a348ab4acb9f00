from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class WorkSchedule:
    """Expected start/end of an employee's day for one weekday (Monday == 0).

    Only used to measure lateness and early departure; it never changes
    attendance records by itself.
    """

    schedule_id: int
    employee_id: int
    day_of_week: int
    start_time: time
    end_time: time

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "employee_id": self.employee_id,
            "day_of_week": self.day_of_week,
            "start_time": self.start_time.strftime("%H:%M:%S"),
            "end_time": self.end_time.strftime("%H:%M:%S"),
        }
