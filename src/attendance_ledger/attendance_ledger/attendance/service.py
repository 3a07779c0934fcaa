from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, require_date
from ..common.validators import clean_note, require_int, require_positive_id, require_status
from ..core.enums import CHECKIN_STATUSES, LEAVE_STATUSES, AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..photos.storage import PhotoStorage
from .lateness import compute_lateness
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Write path of the attendance ledger.

    Every write goes through one atomic upsert keyed by (employee_id, work_date),
    so repeating a call, or two devices racing on the same slot, leaves a single
    record behind.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        clock: Clock | None = None,
        photos: PhotoStorage | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock or SystemClock()
        self._photos = photos

    def mark_attendance(
        self,
        employee_id: int,
        status: AttendanceStatus,
        work_date: date,
        *,
        photo_url: Optional[str] = None,
    ) -> AttendanceRecord:
        """Record a check-in verdict for the day.

        A new record gets lateness computed against "now" when the status is
        PRESENT. An existing record only has its status replaced; its lateness
        is kept as is.
        """

        status = require_status(status, CHECKIN_STATUSES, "mark_attendance")
        work_date = require_date(work_date)
        employee_id = self._require_employee(employee_id)

        now = self._clock.now()
        late_minutes = compute_lateness(now).late_minutes if status == AttendanceStatus.PRESENT else 0

        record = self._attendance.upsert_mark(
            employee_id=employee_id,
            work_date=work_date,
            status=status,
            late_minutes=late_minutes,
            created_at=now,
            photo_url=photo_url,
        )
        logger.info(
            "mark_attendance employee_id=%s work_date=%s status=%s late_minutes=%s",
            employee_id,
            work_date,
            record.status.value,
            record.late_minutes,
        )
        return record

    def correct_status(
        self,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Turn a day into an excused leave, creating the record if the day had none.

        Lateness is always reset to 0.
        """

        status = require_status(status, LEAVE_STATUSES, "correct_status")
        work_date = require_date(work_date)
        employee_id = self._require_employee(employee_id)

        record = self._attendance.upsert_correction(
            employee_id=employee_id,
            work_date=work_date,
            status=status,
            note=clean_note(note),
            created_at=self._clock.now(),
        )
        logger.info("correct_status employee_id=%s work_date=%s status=%s", employee_id, work_date, status.value)
        return record

    def check_in(
        self,
        employee_id: int,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        *,
        photo: Optional[bytes] = None,
    ) -> AttendanceRecord:
        """Mark today's attendance, storing the captured photo first when given.

        A day can be checked into once. Status toggles on an existing day go
        through mark_attendance.
        """

        status = require_status(status, CHECKIN_STATUSES, "check_in")
        employee_id = self._require_employee(employee_id)
        now = self._clock.now()

        existing = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if existing is not None:
            raise ValidationError(
                f"Employee {employee_id} already checked in at {existing.created_at:%H:%M} "
                f"({existing.status.value})"
            )

        photo_url = self._upload(photo, f"{employee_id}_{status.value.lower()}", now)
        return self.mark_attendance(employee_id, status, now.date(), photo_url=photo_url)

    def clock_out(self, employee_id: int, *, photo: Optional[bytes] = None) -> AttendanceRecord:
        """Close today's PRESENT record with the clock-out time and photo."""

        employee_id = self._require_employee(employee_id)
        now = self._clock.now()

        record = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if record is None or not record.is_open:
            raise NotFoundError(f"No open check-in for employee {employee_id} on {now.date()}")

        photo_url = self._upload(photo, f"{employee_id}_clockout", now)
        closed = self._attendance.close_check_in(
            employee_id=employee_id,
            work_date=record.work_date,
            clock_out_at=now,
            clock_out_photo_url=photo_url,
        )
        if not closed:
            raise ConflictError(f"Check-in for employee {employee_id} on {record.work_date} was closed concurrently")

        logger.info("clock_out employee_id=%s work_date=%s at=%s", employee_id, record.work_date, now)
        return self._attendance.get_for_employee_and_date(employee_id, record.work_date)

    def list_open_check_ins(self) -> Sequence[AttendanceRecord]:
        """Check-ins from earlier days that nobody clocked out of."""

        return self._attendance.list_open_before(self._clock.now().date())

    def resolve_open_check_in(
        self,
        employee_id: int,
        work_date: date,
        clock_out_at: datetime,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Administrative clock-out for a forgotten check-in."""

        work_date = require_date(work_date)
        employee_id = require_positive_id(employee_id, "employee_id")
        if not isinstance(clock_out_at, datetime):
            raise ValidationError("clock_out_at must be a datetime")
        if clock_out_at.date() < work_date or clock_out_at > self._clock.now():
            raise ValidationError(f"clock_out_at {clock_out_at} is outside {work_date}..now")

        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if record is None or not record.is_open:
            raise NotFoundError(f"No open check-in for employee {employee_id} on {work_date}")
        if clock_out_at < record.created_at:
            raise ValidationError("clock_out_at is before the check-in")

        closed = self._attendance.close_check_in(
            employee_id=employee_id,
            work_date=work_date,
            clock_out_at=clock_out_at,
            note=clean_note(note),
        )
        if not closed:
            raise ConflictError(f"Check-in for employee {employee_id} on {work_date} was closed concurrently")

        logger.info("resolve_open_check_in employee_id=%s work_date=%s at=%s", employee_id, work_date, clock_out_at)
        return self._attendance.get_for_employee_and_date(employee_id, work_date)

    def set_lateness(self, employee_id: int, work_date: date, late_minutes: int) -> AttendanceRecord:
        """Administrative override of the lateness on a PRESENT record."""

        work_date = require_date(work_date)
        employee_id = require_positive_id(employee_id, "employee_id")
        late_minutes = require_int(late_minutes, "late_minutes")
        if late_minutes < 0:
            raise ValidationError("late_minutes cannot be negative")

        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if record is None:
            raise NotFoundError(f"No attendance record for employee {employee_id} on {work_date}")
        if record.status != AttendanceStatus.PRESENT:
            raise ValidationError(f"Lateness applies only to PRESENT records; status is {record.status.value}")

        # MySQL reports 0 affected rows when the value is unchanged, so the result is not checked.
        self._attendance.update_lateness(employee_id=employee_id, work_date=work_date, late_minutes=late_minutes)

        logger.info("set_lateness employee_id=%s work_date=%s late_minutes=%s", employee_id, work_date, late_minutes)
        return self._attendance.get_for_employee_and_date(employee_id, work_date)

    def get_today_record(self, employee_id: int) -> Optional[AttendanceRecord]:
        employee_id = require_positive_id(employee_id, "employee_id")
        return self._attendance.get_for_employee_and_date(employee_id, self._clock.now().date())

    def _upload(self, photo: Optional[bytes], stem: str, now: datetime) -> Optional[str]:
        if photo is None:
            return None
        if self._photos is None:
            raise ValidationError("Photo storage is not configured")
        return self._photos.upload(photo, f"{stem}_{int(now.timestamp() * 1000)}.jpg")

    def _require_employee(self, employee_id: int) -> int:
        employee_id = require_positive_id(employee_id, "employee_id")
        if self._employees.get_by_id(employee_id) is None:
            raise NotFoundError(f"Employee {employee_id} does not exist")
        return employee_id
