import math
from datetime import date, time
from typing import Optional

from shiftbook.core.errors import InvalidDateError, ValidationError


def _to_seconds(t: time) -> float:
    return t.hour * 3600 + t.minute * 60 + t.second + t.microsecond / 1_000_000


def validate_time_range(start: time, end: time) -> None:
    # end < start is an overnight shift, only identical times are rejected
    if start == end:
        raise ValidationError("start_time and end_time must differ")


def validate_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("name must not be empty")
    return cleaned


def compute_duration_hours(start: time, end: time) -> int:
    """
    Whole hours between start and end on the same reference day.
    A shift ending before it starts crosses midnight, so 24h is added.
    Halves round up (09:00-13:30 -> 5).
    """
    diff_hours = (_to_seconds(end) - _to_seconds(start)) / 3600
    if diff_hours < 0:
        diff_hours += 24
    return int(math.floor(diff_hours + 0.5))


def validate_shift_date(shift_date: date, today: date) -> None:
    if shift_date < today:
        raise InvalidDateError(f"Cannot book a shift in the past ({shift_date.isoformat()})")
