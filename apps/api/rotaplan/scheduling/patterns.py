"""
Plain schedule records shared by the generator, the validators and the
services. None of this touches the database; ORM rows are converted with
``Model.model_validate(row)`` (``from_attributes`` is on everywhere).
"""
from __future__ import annotations

import enum
from datetime import date, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Weekday(str, enum.Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"


# Index matches date.weekday(): 0=Mon ... 6=Sun
WEEKDAYS: list[Weekday] = list(Weekday)

WEEK_LABELS = ["Week A", "Week B", "Week C", "Week D", "Week E", "Week F"]

MIN_ROTATION_WEEKS = 1
MAX_ROTATION_WEEKS = 6


class TemplateStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


class ShiftSource(str, enum.Enum):
    template = "template"
    manual = "manual"
    override = "override"


class ShiftStatus(str, enum.Enum):
    draft = "draft"
    published = "published"


class WeekdayPattern(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    weekday: Weekday
    is_working_day: bool = False
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    break_minutes: int = 30
    expected_hours: float = 0
    location_id: Optional[UUID] = None  # None -> employee's main location


class RotationWeek(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    week_index: int
    week_label: Optional[str] = None
    days: list[WeekdayPattern] = Field(default_factory=list)

    def day(self, weekday: Weekday) -> Optional[WeekdayPattern]:
        for d in self.days:
            if d.weekday == weekday:
                return d
        return None


class RotationTemplate(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    template_id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    status: TemplateStatus = TemplateStatus.active
    is_default: bool = False
    rotation_length_weeks: int
    weeks: list[RotationWeek] = Field(default_factory=list)

    def week(self, week_index: int) -> Optional[RotationWeek]:
        for w in self.weeks:
            if w.week_index == week_index:
                return w
        return None


class Assignment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: Optional[UUID] = None
    employee_id: UUID
    template_id: Optional[UUID] = None
    effective_start_date: date
    effective_end_date: Optional[date] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.effective_end_date is None


class CustomSchedule(BaseModel):
    """A template-shaped rotation owned by a single employee."""

    model_config = ConfigDict(from_attributes=True)

    custom_schedule_id: Optional[UUID] = None
    employee_id: UUID
    name: str = "Custom Schedule"
    rotation_length_weeks: int
    effective_start_date: date
    effective_end_date: Optional[date] = None
    status: TemplateStatus = TemplateStatus.active
    weeks: list[RotationWeek] = Field(default_factory=list)

    def as_template(self) -> RotationTemplate:
        return RotationTemplate(
            name=self.name,
            status=self.status,
            rotation_length_weeks=self.rotation_length_weeks,
            weeks=self.weeks,
        )

    def as_assignment(self) -> Assignment:
        # A custom schedule anchors its own rotation; no assignment row exists.
        return Assignment(
            employee_id=self.employee_id,
            effective_start_date=self.effective_start_date,
            effective_end_date=self.effective_end_date,
        )


class GeneratedShift(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shift_id: Optional[UUID] = None
    employee_id: UUID
    shift_date: date
    start_time: time
    end_time: time
    break_minutes: int = 0
    expected_hours: float = 0
    location_id: Optional[UUID] = None
    source: ShiftSource = ShiftSource.template
    status: ShiftStatus = ShiftStatus.draft
    template_assignment_id: Optional[UUID] = None
    custom_schedule_id: Optional[UUID] = None
    publish_batch_id: Optional[UUID] = None


def blank_weeks(rotation_length_weeks: int) -> list[RotationWeek]:
    """Starting point for a new rotation: Mon-Fri 09:00-17:30, weekends off."""
    weeks: list[RotationWeek] = []
    for i in range(1, rotation_length_weeks + 1):
        days = []
        for weekday in WEEKDAYS:
            weekend = weekday in (Weekday.saturday, Weekday.sunday)
            days.append(
                WeekdayPattern(
                    weekday=weekday,
                    is_working_day=not weekend,
                    start_time=time(9, 0),
                    end_time=time(17, 30),
                    break_minutes=30,
                    expected_hours=0 if weekend else 7.6,
                )
            )
        label = WEEK_LABELS[i - 1] if i <= len(WEEK_LABELS) else f"Week {i}"
        weeks.append(RotationWeek(week_index=i, week_label=label, days=days))
    return weeks
