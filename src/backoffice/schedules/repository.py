from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import WorkSchedule


class ScheduleRepository(Protocol):
    def get_for_employee_and_weekday(
        self, *, employee_id: int, day_of_week: int, business_id: int
    ) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: int, business_id: int) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        day_of_week: int,
        start_time: time,
        end_time: time,
        business_id: int,
    ) -> int:
        """Create or replace the schedule for (employee, weekday).

        Returns schedule_id.
        """

        raise NotImplementedError

    def delete(self, *, employee_id: int, day_of_week: int, business_id: int) -> bool:
        raise NotImplementedError
