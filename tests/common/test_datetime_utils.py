from datetime import date, datetime

import pytest

from src.attendance_ledger.attendance_ledger.common.datetime_utils import (
    FixedClock,
    SystemClock,
    month_bounds,
    parse_iso_date,
    require_date,
)
from src.attendance_ledger.attendance_ledger.core.exceptions import ValidationError


def test_month_bounds_handles_year_end_and_leap_february():
    assert month_bounds(12, 2026) == (date(2026, 12, 1), date(2027, 1, 1))
    assert month_bounds(2, 2024) == (date(2024, 2, 1), date(2024, 3, 1))
    assert month_bounds("2", "2026") == (date(2026, 2, 1), date(2026, 3, 1))


@pytest.mark.parametrize("month", [0, 13, -1, None])
def test_month_bounds_rejects_out_of_range(month):
    with pytest.raises(ValidationError):
        month_bounds(month, 2026)


def test_parse_iso_date():
    assert parse_iso_date("2026-02-18") == date(2026, 2, 18)
    with pytest.raises(ValidationError):
        parse_iso_date("18/02/2026")


def test_require_date_rejects_datetime():
    assert require_date(date(2026, 2, 18)) == date(2026, 2, 18)
    with pytest.raises(ValidationError):
        require_date(datetime(2026, 2, 18, 9, 0))
    with pytest.raises(ValidationError):
        require_date("2026-02-18")


def test_fixed_clock_advances():
    clock = FixedClock(datetime(2026, 2, 18, 21, 30))
    clock.advance(minutes=45)
    assert clock.now() == datetime(2026, 2, 18, 22, 15)


def test_system_clock_returns_naive_time_in_zone():
    now = SystemClock("UTC").now()
    assert now.tzinfo is None


def test_system_clock_rejects_unknown_zone():
    with pytest.raises(ValidationError):
        SystemClock("Mars/Olympus_Mons")
