from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..core.exceptions import ConflictError, DomainError, StoreUnavailableError
from .connection import DatabaseConnection


def translate_mysql_error(exc: mysql.connector.Error) -> Optional[DomainError]:
    """Map connector errors onto the domain taxonomy (None: leave as is)."""

    if isinstance(exc, mysql_errors.IntegrityError):
        return ConflictError(f"Integrity constraint violated: {exc.msg}")
    if isinstance(exc, (mysql_errors.OperationalError, mysql_errors.InterfaceError)):
        return StoreUnavailableError(f"Record store unavailable: {exc.msg}")
    return None


def _reraise(exc: mysql.connector.Error) -> None:
    translated = translate_mysql_error(exc)
    if translated is None:
        raise exc
    raise translated from exc


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        _reraise(exc)

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        _reraise(exc)
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
