from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r}") from None


def parse_iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid timestamp: {value!r}") from None


def require_date(value: object, field_name: str = "work_date") -> date:
    # datetime is a subclass of date; a time component is not allowed here.
    if isinstance(value, datetime) or not isinstance(value, date):
        raise ValidationError(f"{field_name} must be a calendar date")
    return value


def require_month(month: int, year: int) -> tuple[int, int]:
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("month/year must be integers") from None
    if not 1 <= month <= 12:
        raise ValidationError(f"Month out of range: {month}")
    if not 1 <= year <= 9998:
        raise ValidationError(f"Year out of range: {year}")
    return month, year


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """Return [first day of month, first day of next month)."""
    month, year = require_month(month, year)
    start = date(year, month, 1)
    end = start + timedelta(days=calendar.monthrange(year, month)[1])
    return start, end


class Clock(Protocol):
    def now(self) -> datetime:
        """Current local wall time (naive)."""
        raise NotImplementedError


class SystemClock:
    """Wall clock, optionally pinned to an IANA timezone.

    Returns naive datetimes in that zone, matching how DATETIME columns are stored.
    """

    def __init__(self, timezone: Optional[str] = None):
        self._tz: Optional[ZoneInfo] = None
        if timezone:
            try:
                self._tz = ZoneInfo(timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValidationError(f"Unknown timezone: {timezone!r}") from None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now()
        return datetime.now(self._tz).replace(tzinfo=None)


@dataclass
class FixedClock:
    """Clock frozen at a given instant; advance() moves it forward."""

    current: datetime

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)
