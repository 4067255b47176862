from datetime import date, time
from typing import Optional


def validate_time_range(start: time, end: time) -> None:
    # Same-day windows only; overnight shifts are not supported
    if end <= start:
        raise ValueError("end_time must be after start_time")


def validate_date_range(start: date, end: Optional[date]) -> None:
    if end is not None and end < start:
        raise ValueError("effective_end_date must be on or after effective_start_date")


def validate_break(start: time, end: time, break_minutes: int) -> None:
    if break_minutes < 0:
        raise ValueError("break_minutes must be >= 0")
    span = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    if break_minutes >= span:
        raise ValueError("break_minutes must be shorter than the shift")
