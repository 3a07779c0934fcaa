from __future__ import annotations

from datetime import timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, month_bounds
from ..common.validators import require_positive_id
from ..core.constants import DEFAULT_CLOSING_HOUR
from ..core.enums import AttendanceStatus, StatusFilter
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import DayEntry, MonthlySummary, PersistedEntry, SyntheticAbsence
from .repository import AttendanceRepository


class MonthlyReconstructor:
    """Builds an employee's month as one verdict per concluded day.

    Stored records are used as they are. A concluded day with nothing stored
    becomes a SyntheticAbsence. A day is concluded when it lies before today,
    or is today and the clock has reached the closing hour.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        clock: Clock | None = None,
        closing_hour: int = DEFAULT_CLOSING_HOUR,
    ):
        if not 0 <= int(closing_hour) <= 23:
            raise ValidationError(f"closing_hour out of range: {closing_hour}")
        self._attendance = attendance
        self._employees = employees
        self._clock = clock or SystemClock()
        self._closing_hour = int(closing_hour)

    def reconstruct_month(self, employee_id: int, month: int, year: int) -> list[DayEntry]:
        """Entries for the month, most recent day first."""

        start, end = month_bounds(month, year)
        employee_id = require_positive_id(employee_id, "employee_id")
        if self._employees.get_by_id(employee_id) is None:
            raise NotFoundError(f"Employee {employee_id} does not exist")

        records = self._attendance.list_for_employee_between(employee_id, start=start, end=end)
        by_date = {r.work_date: r for r in records}

        now = self._clock.now()
        today = now.date()
        today_concluded = now.hour >= self._closing_hour

        entries: list[DayEntry] = []
        day = end - timedelta(days=1)
        while day >= start:
            record = by_date.get(day)
            if record is not None:
                entries.append(PersistedEntry(record))
            elif day < today or (day == today and today_concluded):
                entries.append(SyntheticAbsence(day))
            day -= timedelta(days=1)
        return entries

    def get_month_ui(self, employee_id: int, month: int, year: int, *, status_filter: StatusFilter = StatusFilter.ALL):
        entries = filter_entries(self.reconstruct_month(employee_id, month, year), status_filter)
        return [self.to_ui(e) for e in entries]

    def to_ui(self, e: DayEntry) -> dict:
        status = e.status
        label = {
            AttendanceStatus.PRESENT: "Present",
            AttendanceStatus.ABSENT_MARKED: "Absent",
            AttendanceStatus.LEAVE_PERMISSION: "Permission",
            AttendanceStatus.LEAVE_SICK: "Sick",
            AttendanceStatus.ABSENT_UNEXCUSED: "Unexcused",
        }.get(status, status.value)

        css = {
            AttendanceStatus.PRESENT: "bg-success",
            AttendanceStatus.ABSENT_MARKED: "bg-secondary",
            AttendanceStatus.LEAVE_PERMISSION: "bg-info",
            AttendanceStatus.LEAVE_SICK: "bg-warning text-dark",
            AttendanceStatus.ABSENT_UNEXCUSED: "bg-danger",
        }.get(status, "bg-secondary")

        if status == AttendanceStatus.PRESENT and e.late_minutes > 0:
            label = f"Late {e.late_minutes}m"
            css = "bg-danger"

        return {
            "id": e.entry_id,
            "date": e.work_date.strftime("%Y-%m-%d"),
            "time": e.created_at.strftime("%H:%M") if e.created_at and e.is_persisted else "-",
            "clock_out": e.clock_out_at.strftime("%H:%M") if e.clock_out_at else "-",
            "status": status.value,
            "label": label,
            "css_class": css,
            "late_minutes": e.late_minutes,
            "note": e.note or "",
            "photo_url": e.photo_url,
            "persisted": e.is_persisted,
        }


def summarize(entries: Iterable[DayEntry]) -> MonthlySummary:
    present = absent = on_leave = late_count = total_late = 0
    for e in entries:
        if e.status == AttendanceStatus.PRESENT:
            present += 1
            if e.late_minutes > 0:
                late_count += 1
                total_late += e.late_minutes
        elif e.status.is_leave:
            on_leave += 1
        elif e.status.is_absent:
            absent += 1
    return MonthlySummary(
        present=present,
        absent=absent,
        on_leave=on_leave,
        late_count=late_count,
        total_late_minutes=total_late,
    )


def filter_entries(entries: Sequence[DayEntry], status_filter: Optional[StatusFilter]) -> list[DayEntry]:
    try:
        status_filter = StatusFilter(status_filter or StatusFilter.ALL)
    except ValueError:
        raise ValidationError(f"Unknown status filter: {status_filter!r}") from None
    if status_filter == StatusFilter.ALL:
        return list(entries)
    if status_filter == StatusFilter.PRESENT:
        return [e for e in entries if e.status == AttendanceStatus.PRESENT]
    if status_filter == StatusFilter.LATE:
        return [e for e in entries if e.status == AttendanceStatus.PRESENT and e.late_minutes > 0]
    if status_filter == StatusFilter.ON_LEAVE:
        return [e for e in entries if e.status.is_leave]
    return [e for e in entries if e.status.is_absent]

