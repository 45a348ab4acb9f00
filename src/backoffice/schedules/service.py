from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..core.exceptions import EmployeeNotFoundError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import WorkSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, employees: EmployeeRepository):
        self._schedules = schedules
        self._employees = employees

    def get_for_date(self, *, business_id: int, employee_id: int, work_date: date) -> Optional[WorkSchedule]:
        return self._schedules.get_for_employee_and_weekday(
            employee_id=int(employee_id),
            day_of_week=work_date.weekday(),
            business_id=int(business_id),
        )

    def list_for_employee(self, *, business_id: int, employee_id: int) -> Sequence[WorkSchedule]:
        return self._schedules.list_for_employee(employee_id=int(employee_id), business_id=int(business_id))

    def set_schedule(
        self,
        *,
        business_id: int,
        employee_id: int,
        day_of_week: int,
        start_time: Optional[time],
        end_time: Optional[time],
    ) -> int:
        if not 0 <= int(day_of_week) <= 6:
            raise ValidationError("day_of_week must be between 0 (Monday) and 6 (Sunday)", field="day_of_week")
        if start_time is None or end_time is None:
            raise ValidationError("start_time and end_time are required", field="start_time")
        if end_time <= start_time:
            raise ValidationError("end_time must be after start_time", field="end_time")

        if not self._employees.get_by_id(int(employee_id), business_id=int(business_id)):
            raise EmployeeNotFoundError(int(employee_id))

        schedule_id = self._schedules.upsert(
            employee_id=int(employee_id),
            day_of_week=int(day_of_week),
            start_time=start_time,
            end_time=end_time,
            business_id=int(business_id),
        )
        logger.info("Schedule set for employee %s weekday %s", employee_id, day_of_week)
        return schedule_id

    def remove_schedule(self, *, business_id: int, employee_id: int, day_of_week: int) -> None:
        if not self._schedules.delete(
            employee_id=int(employee_id), day_of_week=int(day_of_week), business_id=int(business_id)
        ):
            raise NotFoundError("Schedule not found")
