from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Per-day attendance verdict stored in the ledger."""

    PRESENT = "PRESENT"
    ABSENT_MARKED = "ABSENT_MARKED"
    LEAVE_PERMISSION = "LEAVE_PERMISSION"
    LEAVE_SICK = "LEAVE_SICK"
    ABSENT_UNEXCUSED = "ABSENT_UNEXCUSED"

    @property
    def is_leave(self) -> bool:
        return self in LEAVE_STATUSES

    @property
    def is_absent(self) -> bool:
        return self in (AttendanceStatus.ABSENT_MARKED, AttendanceStatus.ABSENT_UNEXCUSED)


# Statuses a check-in event may write.
CHECKIN_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.ABSENT_MARKED})

# Statuses an administrative correction may write.
LEAVE_STATUSES = frozenset({AttendanceStatus.LEAVE_PERMISSION, AttendanceStatus.LEAVE_SICK})


class StatusFilter(str, Enum):
    """Filters offered on the monthly history view."""

    ALL = "ALL"
    PRESENT = "PRESENT"
    LATE = "LATE"
    ON_LEAVE = "ON_LEAVE"
    ABSENT = "ABSENT"
