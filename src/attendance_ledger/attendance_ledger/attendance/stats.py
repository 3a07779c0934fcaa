from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock, require_date
from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository
from .lateness import compute_lateness
from .model import AttendanceRecord, DailyStats
from .repository import AttendanceRepository


def _is_late(record: AttendanceRecord) -> bool:
    if record.late_minutes is not None:
        return record.late_minutes > 0
    # Legacy rows carry no lateness; derive it from the check-in instant.
    return compute_lateness(record.created_at).is_late


class AttendanceStatsService:
    """Fleet-wide counts for one day, built only from stored records."""

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository, *, clock: Clock | None = None):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock or SystemClock()

    def get_daily_stats(self, work_date: Optional[date] = None) -> DailyStats:
        work_date = require_date(work_date) if work_date is not None else self._clock.now().date()

        records = self._attendance.list_for_date(work_date)
        present = [r for r in records if r.status == AttendanceStatus.PRESENT]

        return DailyStats(
            total_employees=self._employees.count(),
            present_count=len(present),
            late_count=sum(1 for r in present if _is_late(r)),
            on_leave_count=sum(1 for r in records if r.status.is_leave),
        )
