from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Record store for the attendance ledger.

    Implementations must enforce uniqueness on (employee_id, work_date). Both
    upsert methods are a single atomic insert-or-update on that key; callers
    never read before writing.
    """

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee_between(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records with start <= work_date < end."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_mark(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        late_minutes: int,
        created_at: datetime,
        photo_url: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert a check-in record; on conflict only the status changes."""

        raise NotImplementedError

    def upsert_correction(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        note: Optional[str],
        created_at: datetime,
    ) -> AttendanceRecord:
        """Insert or overwrite status and note, forcing lateness to 0."""

        raise NotImplementedError

    def update_lateness(self, *, employee_id: int, work_date: date, late_minutes: int) -> bool:
        """Set lateness on an existing PRESENT record. False if no such record."""

        raise NotImplementedError

    def close_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_out_at: datetime,
        clock_out_photo_url: Optional[str] = None,
        note: Optional[str] = None,
    ) -> bool:
        """Stamp the clock-out on an open PRESENT record. False if none is open.

        A None note leaves the stored note untouched.
        """

        raise NotImplementedError

    def list_open_before(self, before: date) -> Sequence[AttendanceRecord]:
        """PRESENT records with no clock-out and work_date < before, oldest first."""

        raise NotImplementedError
