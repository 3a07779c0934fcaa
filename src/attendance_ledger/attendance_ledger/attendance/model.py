from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..core.constants import SYNTHETIC_ID_PREFIX
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one persisted attendance verdict per employee per day.

    ``late_minutes`` is None only for legacy rows written before lateness was stored.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    late_minutes: Optional[int]
    created_at: datetime
    photo_url: Optional[str] = None
    note: Optional[str] = None
    clock_out_at: Optional[datetime] = None
    clock_out_photo_url: Optional[str] = None

    @property
    def is_open(self) -> bool:
        """A check-in still waiting for its clock-out."""
        return self.status == AttendanceStatus.PRESENT and self.clock_out_at is None


@dataclass(frozen=True)
class PersistedEntry:
    """A day in the monthly view backed by a stored record."""

    record: AttendanceRecord

    is_persisted = True

    @property
    def entry_id(self) -> str:
        return str(self.record.attendance_id)

    @property
    def work_date(self) -> date:
        return self.record.work_date

    @property
    def status(self) -> AttendanceStatus:
        return self.record.status

    @property
    def late_minutes(self) -> int:
        return int(self.record.late_minutes or 0)

    @property
    def created_at(self) -> Optional[datetime]:
        return self.record.created_at

    @property
    def photo_url(self) -> Optional[str]:
        return self.record.photo_url

    @property
    def note(self) -> Optional[str]:
        return self.record.note

    @property
    def clock_out_at(self) -> Optional[datetime]:
        return self.record.clock_out_at


@dataclass(frozen=True)
class SyntheticAbsence:
    """A concluded day with no stored record. Read-time only, never persisted."""

    work_date: date

    is_persisted = False
    status = AttendanceStatus.ABSENT_UNEXCUSED
    late_minutes = 0
    created_at = None
    photo_url = None
    note = None
    clock_out_at = None

    @property
    def entry_id(self) -> str:
        return f"{SYNTHETIC_ID_PREFIX}{self.work_date.isoformat()}"


DayEntry = Union[PersistedEntry, SyntheticAbsence]


@dataclass(frozen=True)
class DailyStats:
    total_employees: int
    present_count: int
    late_count: int
    on_leave_count: int


@dataclass(frozen=True)
class MonthlySummary:
    present: int
    absent: int
    on_leave: int
    late_count: int
    total_late_minutes: int
