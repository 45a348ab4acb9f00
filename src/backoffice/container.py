from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.overtime import OvertimeCalculator
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .charity.mysql_charity_repository import MySQLCharityRepository
from .charity.repository import CharityRepository
from .charity.service import CharityService
from .core.constants import DEFAULT_CHARITY_RATE, DEFAULT_WEEKEND_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .rules.mysql_rule_repository import MySQLRuleRepository
from .rules.repository import RuleRepository
from .rules.service import RuleService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    rules_repo: RuleRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository
    payroll_repo: PayrollRepository
    charity_repo: CharityRepository

    rule_service: RuleService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    charity_service: CharityService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    employees_repo: EmployeeRepository,
    rules_repo: RuleRepository,
    schedules_repo: ScheduleRepository,
    attendance_repo: AttendanceRepository,
    payroll_repo: PayrollRepository,
    charity_repo: CharityRepository,
    charity_rate: Decimal = DEFAULT_CHARITY_RATE,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services over any set of repositories (MySQL or in-memory)."""
    rule_service = RuleService(rules_repo)
    schedule_service = ScheduleService(schedules_repo, employees_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        schedules_repo,
        rule_service,
        strategy_factory=AttendanceStrategyFactory(),
        overtime=OvertimeCalculator(weekend_days=frozenset(int(d) for d in weekend_days)),
    )
    payroll_service = PayrollService(payroll_repo, employees_repo, attendance_repo, rule_service)
    charity_service = CharityService(charity_repo, rate=Decimal(str(charity_rate)))

    return Container(
        employees_repo=employees_repo,
        rules_repo=rules_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        charity_repo=charity_repo,
        rule_service=rule_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        charity_service=charity_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    charity_rate: Decimal = DEFAULT_CHARITY_RATE,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        rules_repo=MySQLRuleRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        charity_repo=MySQLCharityRepository(conn),
        charity_rate=charity_rate,
        weekend_days=weekend_days,
        conn=conn,
    )
