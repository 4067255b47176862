from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from rotaplan.models.custom_schedule import CustomSchedule, CustomScheduleDay, CustomScheduleWeek
from rotaplan.models.employee import Employee
from rotaplan.scheduling.patterns import RotationTemplate, TemplateStatus
from rotaplan.schemas.schedule import CustomScheduleCreate, RegenerationResult
from rotaplan.services.audit import Actor, AuditAction, record_audit, snapshot
from rotaplan.services.shift_generation import custom_schedule_to_domain, regenerate_in_session
from rotaplan.services.templates import raise_if_invalid
from rotaplan.services.validators import validate_date_range

logger = logging.getLogger(__name__)


def get_custom_schedule_or_404(db: Session, custom_schedule_id: UUID) -> CustomSchedule:
    cs = db.get(CustomSchedule, custom_schedule_id)
    if not cs:
        raise HTTPException(status_code=404, detail="Custom schedule not found")
    return cs


def list_for_employee(db: Session, employee_id: UUID) -> list[CustomSchedule]:
    return (
        db.execute(
            select(CustomSchedule)
            .where(CustomSchedule.employee_id == employee_id)
            .order_by(CustomSchedule.effective_start_date.desc())
        )
        .scalars()
        .all()
    )


def create_custom_schedule(
    db: Session,
    payload: CustomScheduleCreate,
    actor: Actor,
    today: Optional[date] = None,
) -> tuple[CustomSchedule, RegenerationResult]:
    """
    Give one employee their own rotation. Any earlier active custom schedule
    is deactivated, and template-driven drafts are replaced by this one.
    """
    today = today or date.today()
    emp = db.get(Employee, payload.employee_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")

    try:
        validate_date_range(payload.effective_start_date, payload.effective_end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    rotation = RotationTemplate(
        name=payload.name,
        rotation_length_weeks=payload.rotation_length_weeks,
        weeks=payload.weeks,
    )
    raise_if_invalid(rotation, db, what="Custom schedule")

    try:
        previous = db.execute(
            select(CustomSchedule).where(
                and_(
                    CustomSchedule.employee_id == payload.employee_id,
                    CustomSchedule.status == TemplateStatus.active,
                )
            )
        ).scalars().all()
        for p in previous:
            p.status = TemplateStatus.inactive

        cs = CustomSchedule(
            employee_id=payload.employee_id,
            name=payload.name,
            rotation_length_weeks=payload.rotation_length_weeks,
            effective_start_date=payload.effective_start_date,
            effective_end_date=payload.effective_end_date,
            status=TemplateStatus.active,
            weeks=[
                CustomScheduleWeek(
                    week_index=w.week_index,
                    week_label=w.week_label,
                    days=[CustomScheduleDay(**d.model_dump()) for d in w.days],
                )
                for w in payload.weeks
            ],
        )
        db.add(cs)
        db.flush()

        result = regenerate_in_session(db, payload.employee_id, today)

        record_audit(
            db, actor, AuditAction.create, "EmployeeCustomSchedule", cs.custom_schedule_id,
            f"Created custom schedule {cs.name} for {emp.name}",
            after=custom_schedule_to_domain(cs).model_dump(mode="json"),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(cs)
    return cs, result


def deactivate_custom_schedule(
    db: Session,
    custom_schedule_id: UUID,
    actor: Actor,
    today: Optional[date] = None,
) -> RegenerationResult:
    """Switch a custom schedule off; the employee falls back to their template assignment."""
    today = today or date.today()
    cs = get_custom_schedule_or_404(db, custom_schedule_id)
    if cs.status != TemplateStatus.active:
        raise HTTPException(status_code=400, detail="Custom schedule is not active")

    before = snapshot(cs)
    try:
        cs.status = TemplateStatus.inactive
        db.flush()
        result = regenerate_in_session(db, cs.employee_id, today)
        record_audit(
            db, actor, AuditAction.update, "EmployeeCustomSchedule", custom_schedule_id,
            f"Deactivated custom schedule {cs.name}",
            before=before,
            after=snapshot(cs),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Deactivated custom schedule %s for employee %s", custom_schedule_id, cs.employee_id)
    return result
