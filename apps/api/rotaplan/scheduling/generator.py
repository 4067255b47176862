from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel

from rotaplan.scheduling.patterns import (
    WEEKDAYS,
    Assignment,
    GeneratedShift,
    RotationTemplate,
    ShiftSource,
    ShiftStatus,
    Weekday,
    WeekdayPattern,
)

logger = logging.getLogger(__name__)


# ---------- helpers ----------
def week_start(d: date) -> date:
    """Monday on or before ``d``."""
    return d - timedelta(days=d.weekday())


def rotation_week_index(week_start_date: date, anchor: date, rotation_length: int) -> int:
    """1-based rotation week for the calendar week starting at ``week_start_date``."""
    weeks_since_anchor = (week_start_date - anchor).days // 7
    return (weeks_since_anchor % rotation_length) + 1


def default_horizon_end(start: date, today: date, horizon_weeks: int) -> date:
    return max(start, today) + timedelta(weeks=horizon_weeks)


# ---------- core ----------
def generate(
    assignment: Assignment,
    template: RotationTemplate,
    horizon_end: date,
) -> list[GeneratedShift]:
    """
    Expand one assignment of one rotation template into dated draft shifts.

    The rotation is anchored on the Monday of the assignment's start week, so
    week 1 of the template is always the calendar week the assignment starts in.
    Shifts are emitted for working days between the assignment start and its end
    date (or ``horizon_end`` when the assignment is open), in date order.

    A rotation week missing from the template skips that calendar week.
    """
    rotation_length = template.rotation_length_weeks
    if rotation_length < 1:
        logger.warning(
            "Template %s has rotation length %s; nothing generated",
            template.template_id,
            rotation_length,
        )
        return []

    effective_start = assignment.effective_start_date
    effective_end = assignment.effective_end_date or horizon_end
    anchor = week_start(effective_start)

    shifts: list[GeneratedShift] = []
    current_week = anchor
    while current_week <= effective_end:
        index = rotation_week_index(current_week, anchor, rotation_length)
        schedule_week = template.week(index)

        if schedule_week is None:
            logger.warning(
                "Template %s has no week_index %s; skipping week of %s",
                template.template_id,
                index,
                current_week,
            )
            current_week += timedelta(weeks=1)
            continue

        for offset, weekday in enumerate(WEEKDAYS):
            current_date = current_week + timedelta(days=offset)
            if current_date < effective_start or current_date > effective_end:
                continue

            pattern = schedule_week.day(weekday)
            if pattern is None or not pattern.is_working_day:
                continue
            if pattern.start_time is None or pattern.end_time is None:
                logger.warning(
                    "Template %s week %s %s is a working day without times; skipped",
                    template.template_id,
                    index,
                    weekday.value,
                )
                continue

            shifts.append(
                GeneratedShift(
                    employee_id=assignment.employee_id,
                    shift_date=current_date,
                    start_time=pattern.start_time,
                    end_time=pattern.end_time,
                    break_minutes=pattern.break_minutes,
                    expected_hours=pattern.expected_hours,
                    location_id=pattern.location_id,
                    source=ShiftSource.template,
                    status=ShiftStatus.draft,
                    template_assignment_id=assignment.assignment_id,
                )
            )

        current_week += timedelta(weeks=1)

    return shifts


# ---------- preview ----------
class PreviewDay(BaseModel):
    calendar_date: date
    weekday: Weekday
    pattern: WeekdayPattern


class PreviewWeek(BaseModel):
    week_start: date
    rotation_week_index: int
    week_label: str
    days: list[PreviewDay]


def preview_rotation(
    template: RotationTemplate,
    start_date: date,
    weeks: int = 6,
    week_offset: int = 0,
) -> list[PreviewWeek]:
    """
    Calendar view of a rotation as if it were assigned on ``start_date``.
    Days with no pattern (or a missing rotation week) show as off.
    """
    if template.rotation_length_weeks < 1 or weeks < 1:
        return []

    anchor = week_start(start_date)
    out: list[PreviewWeek] = []
    for w in range(weeks):
        current_week = anchor + timedelta(weeks=week_offset + w)
        index = rotation_week_index(current_week, anchor, template.rotation_length_weeks)
        schedule_week = template.week(index)

        days: list[PreviewDay] = []
        for offset, weekday in enumerate(WEEKDAYS):
            pattern: Optional[WeekdayPattern] = schedule_week.day(weekday) if schedule_week else None
            days.append(
                PreviewDay(
                    calendar_date=current_week + timedelta(days=offset),
                    weekday=weekday,
                    pattern=pattern or WeekdayPattern(weekday=weekday, is_working_day=False),
                )
            )

        label = (schedule_week.week_label if schedule_week else None) or f"Week {index}"
        out.append(
            PreviewWeek(
                week_start=current_week,
                rotation_week_index=index,
                week_label=label,
                days=days,
            )
        )
    return out
