from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconstructor import MonthlyReconstructor
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.stats import AttendanceStatsService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_CLOSING_HOUR
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .photos.storage import LocalPhotoStorage, PhotoStorage


@dataclass(frozen=True)
class Container:
    clock: Clock

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    photo_storage: Optional[PhotoStorage]

    attendance_service: AttendanceService
    reconstructor: MonthlyReconstructor
    stats_service: AttendanceStatsService


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    clock: Clock,
    photo_storage: Optional[PhotoStorage] = None,
    closing_hour: int = DEFAULT_CLOSING_HOUR,
) -> Container:
    """Wire services over any repository implementation."""

    return Container(
        clock=clock,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        photo_storage=photo_storage,
        attendance_service=AttendanceService(attendance_repo, employees_repo, clock=clock, photos=photo_storage),
        reconstructor=MonthlyReconstructor(attendance_repo, employees_repo, clock=clock, closing_hour=closing_hour),
        stats_service=AttendanceStatsService(attendance_repo, employees_repo, clock=clock),
    )


def build_container(
    *,
    db_config: dict,
    timezone: Optional[str] = None,
    closing_hour: int = DEFAULT_CLOSING_HOUR,
    photo_dir: Optional[str] = None,
    photo_base_url: str = "/photos",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        clock=SystemClock(timezone or None),
        photo_storage=LocalPhotoStorage(photo_dir, base_url=photo_base_url) if photo_dir else None,
        closing_hour=closing_hour,
    )
