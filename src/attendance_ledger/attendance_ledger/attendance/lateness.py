"""Lateness rule for check-ins.

The day is split at noon into two shift windows. A morning check-in is measured
against 09:00, an afternoon one against 15:00. Tardiness is reported in whole
30-minute buckets, rounded up: one minute late is reported as 30, thirty-one
minutes as 60.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from ..core.constants import AFTERNOON_TARGET, LATENESS_BUCKET_MINUTES, MORNING_TARGET, NOON_HOUR
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class LatenessResult:
    late_minutes: int
    target_time: datetime
    shift_window_start: datetime

    @property
    def is_late(self) -> bool:
        return self.late_minutes > 0

    @property
    def effective_time(self) -> datetime:
        """Clock-in time as reported after rounding (target + late minutes)."""
        return self.target_time + timedelta(minutes=self.late_minutes)


def round_up_to_bucket(minutes: int, bucket: int = LATENESS_BUCKET_MINUTES) -> int:
    if minutes <= 0:
        return 0
    return -(-minutes // bucket) * bucket


def compute_lateness(instant: datetime) -> LatenessResult:
    if not isinstance(instant, datetime):
        raise ValidationError("compute_lateness expects a datetime")

    if instant.hour < NOON_HOUR:
        target_clock, window_clock = MORNING_TARGET, time(0, 0)
    else:
        target_clock, window_clock = AFTERNOON_TARGET, time(NOON_HOUR, 0)

    day = instant.date()
    target = datetime.combine(day, target_clock, tzinfo=instant.tzinfo)
    window_start = datetime.combine(day, window_clock, tzinfo=instant.tzinfo)

    late_minutes = 0
    if instant > target:
        diff_minutes = int((instant - target) // timedelta(minutes=1))
        late_minutes = round_up_to_bucket(diff_minutes)

    return LatenessResult(late_minutes=late_minutes, target_time=target, shift_window_start=window_start)
