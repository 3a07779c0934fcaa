from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

import pytest

from src.attendance_ledger.attendance_ledger.attendance.model import PersistedEntry, SyntheticAbsence
from src.attendance_ledger.attendance_ledger.attendance.reconstructor import (
    MonthlyReconstructor,
    filter_entries,
    summarize,
)
from src.attendance_ledger.attendance_ledger.attendance.service import AttendanceService
from src.attendance_ledger.attendance_ledger.common.datetime_utils import FixedClock
from src.attendance_ledger.attendance_ledger.core.enums import AttendanceStatus, StatusFilter
from src.attendance_ledger.attendance_ledger.core.exceptions import NotFoundError, ValidationError

from tests.fakes import make_record


@pytest.fixture
def reconstructor(attendance_repo, employees_repo, clock):
    return MonthlyReconstructor(attendance_repo, employees_repo, clock=clock)


def _concluded_days(month: int, year: int, now: datetime, closing_hour: int = 22) -> list[date]:
    days = [date(year, month, d) for d in range(1, calendar.monthrange(year, month)[1] + 1)]
    today = now.date()
    return [d for d in days if d < today or (d == today and now.hour >= closing_hour)]


@pytest.mark.parametrize(
    "now, month, year",
    [
        (datetime(2026, 2, 18, 8, 25), 2, 2026),
        (datetime(2026, 2, 18, 22, 0), 2, 2026),
        (datetime(2026, 2, 18, 21, 59), 2, 2026),
        (datetime(2026, 2, 1, 0, 5), 2, 2026),
        (datetime(2026, 2, 18, 8, 25), 1, 2026),
        (datetime(2026, 2, 18, 8, 25), 3, 2026),
        (datetime(2024, 3, 1, 9, 0), 2, 2024),
        (datetime(2026, 12, 31, 23, 0), 12, 2026),
    ],
)
def test_one_entry_per_concluded_day_in_descending_order(attendance_repo, employees_repo, now, month, year):
    attendance_repo.add(make_record(1, 1, date(year, month, 1), AttendanceStatus.PRESENT))
    r = MonthlyReconstructor(attendance_repo, employees_repo, clock=FixedClock(now))

    entries = r.reconstruct_month(1, month, year)
    dates = [e.work_date for e in entries]

    expected = set(_concluded_days(month, year, now)) | {date(year, month, 1)}
    assert set(dates) == expected
    assert len(dates) == len(set(dates))
    assert dates == sorted(dates, reverse=True)


def test_future_month_is_empty(reconstructor):
    assert reconstructor.reconstruct_month(1, 3, 2026) == []


def test_stored_record_wins_over_synthesis(reconstructor, attendance_repo):
    rec = attendance_repo.add(make_record(5, 1, date(2026, 2, 10), AttendanceStatus.PRESENT, late_minutes=30))

    entries = {e.work_date: e for e in reconstructor.reconstruct_month(1, 2, 2026)}

    assert entries[date(2026, 2, 10)] == PersistedEntry(rec)
    assert entries[date(2026, 2, 9)] == SyntheticAbsence(date(2026, 2, 9))


def test_records_of_other_employees_do_not_leak(reconstructor, attendance_repo):
    attendance_repo.add(make_record(5, 2, date(2026, 2, 10), AttendanceStatus.PRESENT))

    entries = {e.work_date: e for e in reconstructor.reconstruct_month(1, 2, 2026)}

    assert not entries[date(2026, 2, 10)].is_persisted


def test_today_before_closing_has_no_entry_after_closing_is_absent(attendance_repo, employees_repo):
    clock = FixedClock(datetime(2026, 2, 18, 21, 59))
    r = MonthlyReconstructor(attendance_repo, employees_repo, clock=clock)
    assert r.reconstruct_month(1, 2, 2026)[0].work_date == date(2026, 2, 17)

    clock.advance(minutes=1)
    first = r.reconstruct_month(1, 2, 2026)[0]
    assert first == SyntheticAbsence(date(2026, 2, 18))


def test_closing_hour_is_configurable(attendance_repo, employees_repo):
    r = MonthlyReconstructor(
        attendance_repo, employees_repo, clock=FixedClock(datetime(2026, 2, 18, 18, 0)), closing_hour=18
    )
    assert r.reconstruct_month(1, 2, 2026)[0].work_date == date(2026, 2, 18)


def test_synthetic_entry_shape():
    entry = SyntheticAbsence(date(2026, 2, 9))

    assert entry.status == AttendanceStatus.ABSENT_UNEXCUSED
    assert entry.late_minutes == 0
    assert entry.photo_url is None
    assert entry.is_persisted is False
    assert entry.entry_id == "absent-2026-02-09"
    assert not hasattr(entry, "attendance_id")


def test_correcting_synthetic_day_replaces_it_with_persisted_leave(attendance_repo, employees_repo, clock):
    svc = AttendanceService(attendance_repo, employees_repo, clock=clock)
    r = MonthlyReconstructor(attendance_repo, employees_repo, clock=clock)
    day = date(2026, 2, 16)

    before = {e.work_date: e for e in r.reconstruct_month(1, 2, 2026)}
    assert before[day] == SyntheticAbsence(day)

    svc.correct_status(1, day, AttendanceStatus.LEAVE_SICK, "flu")

    after = {e.work_date: e for e in r.reconstruct_month(1, 2, 2026)}
    assert after[day].is_persisted
    assert after[day].status == AttendanceStatus.LEAVE_SICK
    assert after[day].late_minutes == 0
    assert after[day].note == "flu"
    assert len(after) == len(before)


def test_unknown_employee_raises_not_found(reconstructor):
    with pytest.raises(NotFoundError):
        reconstructor.reconstruct_month(42, 2, 2026)


@pytest.mark.parametrize("month", [0, 13, "x"])
def test_invalid_month_is_rejected_before_store(reconstructor, attendance_repo, month):
    with pytest.raises(ValidationError):
        reconstructor.reconstruct_month(1, month, 2026)
    assert attendance_repo.calls == []


def test_invalid_closing_hour_is_rejected(attendance_repo, employees_repo):
    with pytest.raises(ValidationError):
        MonthlyReconstructor(attendance_repo, employees_repo, closing_hour=24)


def _sample_month(attendance_repo, employees_repo):
    attendance_repo.add(make_record(1, 1, date(2026, 1, 5), AttendanceStatus.PRESENT, late_minutes=0))
    attendance_repo.add(make_record(2, 1, date(2026, 1, 6), AttendanceStatus.PRESENT, late_minutes=60))
    attendance_repo.add(make_record(3, 1, date(2026, 1, 7), AttendanceStatus.PRESENT, late_minutes=30))
    attendance_repo.add(make_record(4, 1, date(2026, 1, 8), AttendanceStatus.LEAVE_SICK))
    attendance_repo.add(make_record(5, 1, date(2026, 1, 9), AttendanceStatus.LEAVE_PERMISSION))
    attendance_repo.add(make_record(6, 1, date(2026, 1, 12), AttendanceStatus.ABSENT_MARKED))
    r = MonthlyReconstructor(attendance_repo, employees_repo, clock=FixedClock(datetime(2026, 2, 18, 8, 0)))
    return r.reconstruct_month(1, 1, 2026)


def test_summarize_month(attendance_repo, employees_repo):
    summary = summarize(_sample_month(attendance_repo, employees_repo))

    assert summary.present == 3
    assert summary.late_count == 2
    assert summary.total_late_minutes == 90
    assert summary.on_leave == 2
    # 31 days, 5 non-absent records; the marked absence plus 25 synthetic ones.
    assert summary.absent == 26


def test_filter_entries(attendance_repo, employees_repo):
    entries = _sample_month(attendance_repo, employees_repo)

    assert len(filter_entries(entries, StatusFilter.ALL)) == 31
    assert [e.work_date.day for e in filter_entries(entries, StatusFilter.LATE)] == [7, 6]
    assert len(filter_entries(entries, StatusFilter.PRESENT)) == 3
    assert len(filter_entries(entries, "ON_LEAVE")) == 2
    assert len(filter_entries(entries, StatusFilter.ABSENT)) == 26

    with pytest.raises(ValidationError):
        filter_entries(entries, "SOMETIMES")


def test_month_ui_rows(attendance_repo, employees_repo):
    _sample_month(attendance_repo, employees_repo)
    r = MonthlyReconstructor(attendance_repo, employees_repo, clock=FixedClock(datetime(2026, 2, 18, 8, 0)))

    rows = r.get_month_ui(1, 1, 2026, status_filter=StatusFilter.LATE)

    assert rows[0]["date"] == "2026-01-07"
    assert rows[0]["label"] == "Late 30m"
    assert rows[0]["css_class"] == "bg-danger"
    assert rows[0]["persisted"] is True

    synthetic = r.get_month_ui(1, 1, 2026)[0]
    assert synthetic == {
        "id": "absent-2026-01-31",
        "date": "2026-01-31",
        "time": "-",
        "clock_out": "-",
        "status": "ABSENT_UNEXCUSED",
        "label": "Unexcused",
        "css_class": "bg-danger",
        "late_minutes": 0,
        "note": "",
        "photo_url": None,
        "persisted": False,
    }
