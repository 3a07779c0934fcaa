from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, employee_id, work_date, status, late_minutes, created_at, photo_url, note, "
    "clock_out_at, clock_out_photo_url"
)


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    late = r.get("late_minutes")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        late_minutes=int(late) if late is not None else None,
        created_at=r["created_at"],
        photo_url=r.get("photo_url"),
        note=r.get("note"),
        clock_out_at=r.get("clock_out_at"),
        clock_out_photo_url=r.get("clock_out_photo_url"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """Ledger store on MySQL.

    The schema carries UNIQUE KEY (employee_id, work_date); writes rely on
    INSERT ... ON DUPLICATE KEY UPDATE so a slot is claimed in one statement.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_by_key(cur, employee_id, work_date)

    def list_for_employee_between(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date >= %s AND work_date < %s
                ORDER BY work_date DESC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s
                ORDER BY employee_id ASC
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, status, late_minutes, created_at, photo_url)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (int(employee_id), work_date, status.value, int(late_minutes), created_at, photo_url),
            )
            return self._select_by_key(cur, employee_id, work_date)

    def upsert_correction(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        note: Optional[str],
        created_at: datetime,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, status, late_minutes, created_at, note)
                VALUES(%s,%s,%s,0,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), late_minutes=0, note=VALUES(note)
                """,
                (int(employee_id), work_date, status.value, created_at, note),
            )
            return self._select_by_key(cur, employee_id, work_date)

    def update_lateness(self, *, employee_id: int, work_date: date, late_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET late_minutes=%s
                WHERE employee_id=%s AND work_date=%s AND status=%s
                """,
                (int(late_minutes), int(employee_id), work_date, AttendanceStatus.PRESENT.value),
            )
            return cur.rowcount > 0

    def close_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_out_at: datetime,
        clock_out_photo_url: Optional[str] = None,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out_at=%s, clock_out_photo_url=%s, note=COALESCE(%s, note)
                WHERE employee_id=%s AND work_date=%s AND status=%s AND clock_out_at IS NULL
                """,
                (
                    clock_out_at,
                    clock_out_photo_url,
                    note,
                    int(employee_id),
                    work_date,
                    AttendanceStatus.PRESENT.value,
                ),
            )
            return cur.rowcount > 0

    def list_open_before(self, before: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE status=%s AND clock_out_at IS NULL AND work_date < %s
                ORDER BY work_date ASC, employee_id ASC
                """,
                (AttendanceStatus.PRESENT.value, before),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def _select_by_key(self, cur, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE employee_id=%s AND work_date=%s
            """,
            (int(employee_id), work_date),
        )
        r = fetchone(cur)
        return _to_record(r) if r else None
