from __future__ import annotations

import enum
from datetime import time
from typing import Iterable, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from rotaplan.scheduling.patterns import GeneratedShift, Weekday


# ---------- helpers ----------
def to_minutes(t) -> int:
    if hasattr(t, "hour"):
        return int(t.hour) * 60 + int(t.minute)
    s = str(t)
    hh, mm = s[:5].split(":")
    return int(hh) * 60 + int(mm)


def overlaps(a_start_m: int, a_end_m: int, b_start_m: int, b_end_m: int) -> bool:
    # Half-open windows: 09:00-12:00 and 12:00-17:00 touch but do not overlap.
    return a_start_m < b_end_m and b_start_m < a_end_m


def net_hours(start: time, end: time, break_minutes: int) -> float:
    return (to_minutes(end) - to_minutes(start) - (break_minutes or 0)) / 60


def _hhmm(t) -> str:
    m = to_minutes(t)
    return f"{m // 60:02d}:{m % 60:02d}"


# ---------- overlap ----------
class OverlapConflict(BaseModel):
    conflicting_shift: GeneratedShift
    reason: str


def check_overlap(
    candidate: GeneratedShift,
    existing: Iterable[GeneratedShift],
    exclude_shift_id: Optional[UUID] = None,
) -> Optional[OverlapConflict]:
    """
    First shift in ``existing`` whose window overlaps the candidate, or None.

    ``existing`` is expected to hold the employee's shifts for the candidate's
    date; anything else is ignored. The shift being edited is skipped, either
    via ``exclude_shift_id`` or the candidate's own id.
    """
    skip_id = exclude_shift_id or candidate.shift_id
    c_start = to_minutes(candidate.start_time)
    c_end = to_minutes(candidate.end_time)

    for shift in existing:
        if skip_id is not None and shift.shift_id == skip_id:
            continue
        if shift.employee_id != candidate.employee_id or shift.shift_date != candidate.shift_date:
            continue
        if overlaps(c_start, c_end, to_minutes(shift.start_time), to_minutes(shift.end_time)):
            return OverlapConflict(
                conflicting_shift=shift,
                reason=(
                    f"Overlaps existing shift {_hhmm(shift.start_time)}-{_hhmm(shift.end_time)} "
                    f"on {shift.shift_date.isoformat()}"
                ),
            )
    return None


# ---------- availability ----------
class AvailabilityStatus(str, enum.Enum):
    no_availability_record = "no_availability_record"
    unavailable = "unavailable"
    time_conflict = "time_conflict"
    hours_exceeded = "hours_exceeded"
    note = "note"
    available = "available"


class AvailabilityWindow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    weekday: Weekday
    is_available: bool = True
    available_start: Optional[time] = None
    available_end: Optional[time] = None
    max_hours: Optional[float] = None
    notes: Optional[str] = None


class AvailabilityCheck(BaseModel):
    status: AvailabilityStatus
    message: str

    @property
    def is_warning(self) -> bool:
        return self.status in (
            AvailabilityStatus.unavailable,
            AvailabilityStatus.time_conflict,
            AvailabilityStatus.hours_exceeded,
        )


def check_availability(
    candidate: GeneratedShift,
    availability: Optional[AvailabilityWindow],
) -> AvailabilityCheck:
    """
    Advisory comparison of a shift against the employee's weekly availability
    for that weekday. Never blocks a save; the first matching status wins.
    """
    if availability is None:
        return AvailabilityCheck(
            status=AvailabilityStatus.no_availability_record,
            message="No availability configured for this day",
        )

    day = availability.weekday.value.capitalize()

    if not availability.is_available:
        return AvailabilityCheck(
            status=AvailabilityStatus.unavailable,
            message=f"Employee is marked unavailable on {day}",
        )

    if availability.available_start is not None and availability.available_end is not None:
        a_start = to_minutes(availability.available_start)
        a_end = to_minutes(availability.available_end)
        if to_minutes(candidate.start_time) < a_start or to_minutes(candidate.end_time) > a_end:
            return AvailabilityCheck(
                status=AvailabilityStatus.time_conflict,
                message=(
                    f"Shift falls outside available hours "
                    f"{_hhmm(availability.available_start)}-{_hhmm(availability.available_end)}"
                ),
            )

    hours = net_hours(candidate.start_time, candidate.end_time, candidate.break_minutes)
    if availability.max_hours is not None and hours > availability.max_hours:
        return AvailabilityCheck(
            status=AvailabilityStatus.hours_exceeded,
            message=f"Shift is {hours:g}h, above the {availability.max_hours:g}h maximum for {day}",
        )

    if availability.notes:
        return AvailabilityCheck(status=AvailabilityStatus.note, message=availability.notes)

    return AvailabilityCheck(status=AvailabilityStatus.available, message="Employee is available")
