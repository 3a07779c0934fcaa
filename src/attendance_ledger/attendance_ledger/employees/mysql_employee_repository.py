from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, name, photo_url, created_at
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=int(row["employee_id"]),
                name=row["name"],
                photo_url=row.get("photo_url"),
                created_at=row.get("created_at"),
            )

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, name, photo_url, created_at
                FROM employees
                ORDER BY name ASC
                """
            )
            return [
                Employee(
                    employee_id=int(r["employee_id"]),
                    name=r["name"],
                    photo_url=r.get("photo_url"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM employees")
            row = fetchone(cur)
            return int(row["total"]) if row else 0
