import uuid
from datetime import date, time

import pytest

from rotaplan.scheduling.conflicts import (
    AvailabilityStatus,
    AvailabilityWindow,
    check_availability,
    check_overlap,
    net_hours,
    overlaps,
    to_minutes,
)
from rotaplan.scheduling.patterns import GeneratedShift, Weekday

EMP = uuid.uuid4()
DAY = date(2024, 1, 1)  # Monday


def _shift(start, end, employee_id=EMP, shift_date=DAY, shift_id=None, break_minutes=0):
    return GeneratedShift(
        shift_id=shift_id,
        employee_id=employee_id,
        shift_date=shift_date,
        start_time=start,
        end_time=end,
        break_minutes=break_minutes,
    )


def test_to_minutes_and_half_open_overlap():
    assert to_minutes(time(9, 30)) == 570
    assert overlaps(540, 780, 720, 1020)
    assert not overlaps(540, 720, 720, 1020)
    assert not overlaps(720, 1020, 540, 720)


def test_overlapping_windows_conflict():
    existing = _shift(time(12, 0), time(17, 0), shift_id=uuid.uuid4())
    conflict = check_overlap(_shift(time(9, 0), time(13, 0)), [existing])

    assert conflict is not None
    assert conflict.conflicting_shift == existing
    assert conflict.reason == "Overlaps existing shift 12:00-17:00 on 2024-01-01"


def test_touching_windows_do_not_conflict():
    existing = _shift(time(12, 0), time(17, 0), shift_id=uuid.uuid4())
    assert check_overlap(_shift(time(9, 0), time(12, 0)), [existing]) is None


def test_other_employee_or_date_is_ignored():
    others = [
        _shift(time(9, 0), time(17, 0), employee_id=uuid.uuid4(), shift_id=uuid.uuid4()),
        _shift(time(9, 0), time(17, 0), shift_date=date(2024, 1, 2), shift_id=uuid.uuid4()),
    ]
    assert check_overlap(_shift(time(10, 0), time(11, 0)), others) is None


def test_edited_shift_does_not_conflict_with_itself():
    sid = uuid.uuid4()
    stored = _shift(time(9, 0), time(17, 0), shift_id=sid)
    edited = _shift(time(10, 0), time(16, 0), shift_id=sid)

    assert check_overlap(edited, [stored]) is None
    assert check_overlap(_shift(time(10, 0), time(16, 0)), [stored], exclude_shift_id=sid) is None


def test_first_conflict_in_order_is_reported():
    first = _shift(time(8, 0), time(10, 0), shift_id=uuid.uuid4())
    second = _shift(time(9, 30), time(11, 0), shift_id=uuid.uuid4())
    conflict = check_overlap(_shift(time(9, 0), time(12, 0)), [first, second])
    assert conflict.conflicting_shift.shift_id == first.shift_id


def test_net_hours():
    assert net_hours(time(9, 0), time(17, 30), 30) == pytest.approx(8.0)
    assert net_hours(time(9, 0), time(13, 0), 0) == pytest.approx(4.0)


def _window(**kw):
    base = dict(
        weekday=Weekday.monday,
        is_available=True,
        available_start=time(8, 0),
        available_end=time(18, 0),
        max_hours=8,
    )
    base.update(kw)
    return AvailabilityWindow(**base)


def test_no_availability_record():
    check = check_availability(_shift(time(9, 0), time(17, 0)), None)
    assert check.status == AvailabilityStatus.no_availability_record
    assert not check.is_warning


def test_unavailable_takes_priority():
    check = check_availability(
        _shift(time(6, 0), time(23, 0)), _window(is_available=False, notes="School run")
    )
    assert check.status == AvailabilityStatus.unavailable
    assert check.message == "Employee is marked unavailable on Monday"
    assert check.is_warning


def test_time_conflict_before_hours():
    check = check_availability(_shift(time(7, 0), time(19, 0)), _window(max_hours=4))
    assert check.status == AvailabilityStatus.time_conflict
    assert "08:00-18:00" in check.message


def test_hours_exceeded_uses_net_hours():
    shift = _shift(time(8, 0), time(17, 30), break_minutes=30)
    assert check_availability(shift, _window(max_hours=8)).status == AvailabilityStatus.hours_exceeded
    assert check_availability(shift, _window(max_hours=9)).status == AvailabilityStatus.available


def test_note_is_informational():
    check = check_availability(_shift(time(9, 0), time(12, 0)), _window(notes="Prefers mornings"))
    assert check.status == AvailabilityStatus.note
    assert check.message == "Prefers mornings"
    assert not check.is_warning


def test_open_window_accepts_any_time():
    check = check_availability(
        _shift(time(5, 0), time(9, 0)), _window(available_start=None, available_end=None, max_hours=None)
    )
    assert check.status == AvailabilityStatus.available
