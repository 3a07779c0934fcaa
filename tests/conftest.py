from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_ledger.attendance_ledger.common.datetime_utils import FixedClock

from tests.fakes import InMemoryAttendance, InMemoryEmployees


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday, mid-morning
    return datetime(2026, 2, 18, 8, 25, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees.with_ids(1, 2, 3)
