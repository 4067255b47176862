"""
Decide which rotation (if any) drives shift generation for an employee.

A custom schedule always wins over a template assignment; the generator itself
never sees both.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Literal, Mapping, Optional, Union
from uuid import UUID

from pydantic import BaseModel

from rotaplan.scheduling.patterns import (
    Assignment,
    CustomSchedule,
    RotationTemplate,
    TemplateStatus,
)

logger = logging.getLogger(__name__)


class TemplateSource(BaseModel):
    kind: Literal["template"] = "template"
    assignment: Assignment
    template: RotationTemplate


class CustomSource(BaseModel):
    kind: Literal["custom"] = "custom"
    custom_schedule: CustomSchedule


class NoSource(BaseModel):
    kind: Literal["none"] = "none"


ScheduleSource = Union[TemplateSource, CustomSource, NoSource]


def active_custom_schedule(
    custom_schedules: Iterable[CustomSchedule], today: date
) -> Optional[CustomSchedule]:
    candidates = [
        cs
        for cs in custom_schedules
        if cs.status == TemplateStatus.active
        and (cs.effective_end_date is None or cs.effective_end_date >= today)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda cs: cs.effective_start_date)


def active_assignment(assignments: Iterable[Assignment], today: date) -> Optional[Assignment]:
    """The open assignment, else the latest one whose end date has not passed."""
    assignments = list(assignments)
    for a in assignments:
        if a.is_open:
            return a
    current = [a for a in assignments if a.effective_end_date >= today]
    if not current:
        return None
    return max(current, key=lambda a: a.effective_start_date)


def resolve_schedule_source(
    custom_schedules: Iterable[CustomSchedule],
    assignments: Iterable[Assignment],
    templates: Mapping[UUID, RotationTemplate],
    today: date,
) -> ScheduleSource:
    custom = active_custom_schedule(custom_schedules, today)
    if custom is not None:
        return CustomSource(custom_schedule=custom)

    assignment = active_assignment(assignments, today)
    if assignment is None:
        return NoSource()

    template = templates.get(assignment.template_id)
    if template is None:
        logger.warning(
            "Assignment %s references missing template %s",
            assignment.assignment_id,
            assignment.template_id,
        )
        return NoSource()

    return TemplateSource(assignment=assignment, template=template)
