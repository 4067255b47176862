from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import and_, delete, select
from sqlalchemy.orm import Session

from rotaplan.core.config import settings
from rotaplan.models.assignment import ScheduleAssignment
from rotaplan.models.custom_schedule import CustomSchedule as CustomScheduleRow
from rotaplan.models.employee import Employee
from rotaplan.models.schedule_template import ScheduleTemplate
from rotaplan.models.scheduled_shifts import ScheduledShift
from rotaplan.scheduling.conflicts import check_overlap
from rotaplan.scheduling.generator import default_horizon_end, generate
from rotaplan.scheduling.patterns import (
    Assignment,
    CustomSchedule,
    GeneratedShift,
    ShiftSource,
    ShiftStatus,
)
from rotaplan.scheduling.sources import (
    CustomSource,
    NoSource,
    ScheduleSource,
    TemplateSource,
    resolve_schedule_source,
)
from rotaplan.schemas.schedule import RegenerationResult, SkippedShift
from rotaplan.services.audit import Actor, AuditAction, record_audit
from rotaplan.services.templates import template_to_domain, week_from_row

logger = logging.getLogger(__name__)


def custom_schedule_to_domain(row: CustomScheduleRow) -> CustomSchedule:
    return CustomSchedule(
        custom_schedule_id=row.custom_schedule_id,
        employee_id=row.employee_id,
        name=row.name,
        rotation_length_weeks=row.rotation_length_weeks,
        effective_start_date=row.effective_start_date,
        effective_end_date=row.effective_end_date,
        status=row.status,
        weeks=[week_from_row(w) for w in row.weeks],
    )


def load_schedule_source(db: Session, employee_id: UUID, today: date) -> ScheduleSource:
    custom_rows = (
        db.execute(select(CustomScheduleRow).where(CustomScheduleRow.employee_id == employee_id))
        .scalars()
        .all()
    )
    assignment_rows = (
        db.execute(select(ScheduleAssignment).where(ScheduleAssignment.employee_id == employee_id))
        .scalars()
        .all()
    )

    template_ids = {a.template_id for a in assignment_rows}
    templates = {}
    if template_ids:
        for t in db.execute(select(ScheduleTemplate).where(ScheduleTemplate.template_id.in_(template_ids))).scalars():
            templates[t.template_id] = template_to_domain(t)

    return resolve_schedule_source(
        custom_schedules=[custom_schedule_to_domain(c) for c in custom_rows],
        assignments=[Assignment.model_validate(a) for a in assignment_rows],
        templates=templates,
        today=today,
    )


def shifts_for_source(source: ScheduleSource, today: date, horizon_weeks: int) -> list[GeneratedShift]:
    if isinstance(source, TemplateSource):
        horizon_end = default_horizon_end(source.assignment.effective_start_date, today, horizon_weeks)
        return generate(source.assignment, source.template, horizon_end)

    if isinstance(source, CustomSource):
        custom = source.custom_schedule
        horizon_end = default_horizon_end(custom.effective_start_date, today, horizon_weeks)
        shifts = generate(custom.as_assignment(), custom.as_template(), horizon_end)
        return [s.model_copy(update={"custom_schedule_id": custom.custom_schedule_id}) for s in shifts]

    return []


def regenerate_in_session(
    db: Session,
    employee_id: UUID,
    today: date,
    horizon_weeks: Optional[int] = None,
) -> RegenerationResult:
    """
    Replace the employee's template-sourced drafts with a fresh expansion of
    their active schedule. Manual, override and published shifts stay put, and
    a generated shift that would overlap one of them is skipped.

    Does not commit; callers decide the transaction boundary.
    """
    horizon_weeks = horizon_weeks or settings.default_horizon_weeks
    source = load_schedule_source(db, employee_id, today)

    removed = db.execute(
        delete(ScheduledShift).where(
            and_(
                ScheduledShift.employee_id == employee_id,
                ScheduledShift.source == ShiftSource.template,
                ScheduledShift.status == ShiftStatus.draft,
            )
        )
    ).rowcount or 0

    result = RegenerationResult(employee_id=employee_id, source=source.kind, removed=removed)
    if isinstance(source, NoSource):
        logger.info("Employee %s has no active schedule; removed %s drafts", employee_id, removed)
        return result

    generated = shifts_for_source(source, today, horizon_weeks)

    kept_by_date: Dict[date, List[GeneratedShift]] = defaultdict(list)
    if generated:
        kept_rows = (
            db.execute(
                select(ScheduledShift)
                .where(
                    and_(
                        ScheduledShift.employee_id == employee_id,
                        ScheduledShift.shift_date >= generated[0].shift_date,
                        ScheduledShift.shift_date <= generated[-1].shift_date,
                    )
                )
                .order_by(ScheduledShift.created_at, ScheduledShift.shift_id)
            )
            .scalars()
            .all()
        )
        for row in kept_rows:
            kept_by_date[row.shift_date].append(GeneratedShift.model_validate(row))

    for shift in generated:
        conflict = check_overlap(shift, kept_by_date[shift.shift_date])
        if conflict is not None:
            result.skipped.append(
                SkippedShift(
                    shift_date=shift.shift_date,
                    start_time=shift.start_time,
                    end_time=shift.end_time,
                    reason=conflict.reason,
                )
            )
            continue

        db.add(ScheduledShift(**shift.model_dump(exclude={"shift_id"})))
        kept_by_date[shift.shift_date].append(shift)
        result.created += 1

    db.flush()
    logger.info(
        "Regenerated employee %s from %s source: removed=%s created=%s skipped=%s",
        employee_id,
        source.kind,
        result.removed,
        result.created,
        len(result.skipped),
    )
    return result


def _record_generation(db: Session, actor: Actor, result: RegenerationResult) -> None:
    record_audit(
        db, actor, AuditAction.generate, "Employee", result.employee_id,
        f"Regenerated from {result.source} source: removed {result.removed}, "
        f"created {result.created}, skipped {len(result.skipped)}",
        after=result.model_dump(mode="json"),
    )


def regenerate_shifts_for_employee(
    db: Session,
    employee_id: UUID,
    actor: Actor,
    today: Optional[date] = None,
    horizon_weeks: Optional[int] = None,
) -> RegenerationResult:
    if not db.get(Employee, employee_id):
        raise HTTPException(status_code=404, detail="Employee not found")

    today = today or date.today()
    try:
        result = regenerate_in_session(db, employee_id, today, horizon_weeks)
        _record_generation(db, actor, result)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return result


def regenerate_for_template(
    db: Session,
    template_id: UUID,
    actor: Actor,
    today: Optional[date] = None,
    horizon_weeks: Optional[int] = None,
) -> list[RegenerationResult]:
    """Regenerate every employee whose open assignment uses the template."""
    today = today or date.today()
    employee_ids = (
        db.execute(
            select(ScheduleAssignment.employee_id).where(
                and_(
                    ScheduleAssignment.template_id == template_id,
                    ScheduleAssignment.effective_end_date.is_(None),
                )
            )
        )
        .scalars()
        .all()
    )

    results = []
    try:
        for eid in employee_ids:
            result = regenerate_in_session(db, eid, today, horizon_weeks)
            _record_generation(db, actor, result)
            results.append(result)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return results
