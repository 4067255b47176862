from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import and_, delete, select
from sqlalchemy.orm import Session

from rotaplan.models.assignment import ScheduleAssignment
from rotaplan.models.employee import Employee
from rotaplan.models.schedule_template import ScheduleTemplate
from rotaplan.models.scheduled_shifts import ScheduledShift
from rotaplan.scheduling.patterns import ShiftSource, ShiftStatus, TemplateStatus
from rotaplan.schemas.schedule import AssignmentCreate, AssignmentOut, RegenerationResult
from rotaplan.services.audit import Actor, AuditAction, record_audit, snapshot
from rotaplan.services.shift_generation import regenerate_in_session
from rotaplan.services.templates import get_template_or_404
from rotaplan.services.validators import validate_date_range

logger = logging.getLogger(__name__)


def _require_employee(db: Session, employee_id: UUID) -> Employee:
    emp = db.get(Employee, employee_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


def open_assignment(db: Session, employee_id: UUID) -> Optional[ScheduleAssignment]:
    return db.execute(
        select(ScheduleAssignment)
        .where(
            and_(
                ScheduleAssignment.employee_id == employee_id,
                ScheduleAssignment.effective_end_date.is_(None),
            )
        )
        .order_by(ScheduleAssignment.effective_start_date.desc())
    ).scalars().first()


def assign_template(
    db: Session,
    employee_id: UUID,
    payload: AssignmentCreate,
    actor: Actor,
    today: Optional[date] = None,
) -> tuple[ScheduleAssignment, RegenerationResult]:
    """
    Put an employee on a rotation template from ``effective_start_date``.

    The employee's current open assignment is closed on the new start date,
    then their draft template shifts are regenerated. One transaction.
    """
    today = today or date.today()
    emp = _require_employee(db, employee_id)
    template = get_template_or_404(db, payload.template_id)

    if template.status != TemplateStatus.active:
        raise HTTPException(status_code=400, detail="Template is inactive")
    try:
        validate_date_range(payload.effective_start_date, payload.effective_end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    current = open_assignment(db, employee_id)
    if current is not None and payload.effective_start_date < current.effective_start_date:
        raise HTTPException(
            status_code=400,
            detail="New assignment cannot start before the current assignment",
        )

    try:
        if current is not None:
            current.effective_end_date = payload.effective_start_date
            logger.info(
                "Closed assignment %s for employee %s on %s",
                current.assignment_id,
                employee_id,
                payload.effective_start_date,
            )

        assignment = ScheduleAssignment(
            employee_id=employee_id,
            template_id=template.template_id,
            effective_start_date=payload.effective_start_date,
            effective_end_date=payload.effective_end_date,
            notes=payload.notes,
        )
        db.add(assignment)
        db.flush()

        result = regenerate_in_session(db, employee_id, today)

        record_audit(
            db, actor, AuditAction.assign, "EmployeeScheduleAssignment", assignment.assignment_id,
            f"Assigned {template.name} to {emp.name} from {payload.effective_start_date.isoformat()}",
            after=snapshot(assignment),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(assignment)
    return assignment, result


def unassign(
    db: Session,
    assignment_id: UUID,
    actor: Actor,
    today: Optional[date] = None,
) -> int:
    """
    End an assignment today and drop the drafts it generated. An assignment that
    has not started yet ends on its own start date. Returns the number removed.
    """
    today = today or date.today()
    assignment = db.get(ScheduleAssignment, assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")
    if assignment.effective_end_date is not None and assignment.effective_end_date < today:
        raise HTTPException(status_code=400, detail="Assignment has already ended")

    before = snapshot(assignment)
    try:
        assignment.effective_end_date = max(today, assignment.effective_start_date)
        removed = db.execute(
            delete(ScheduledShift).where(
                and_(
                    ScheduledShift.template_assignment_id == assignment_id,
                    ScheduledShift.source == ShiftSource.template,
                    ScheduledShift.status == ShiftStatus.draft,
                )
            )
        ).rowcount or 0

        record_audit(
            db, actor, AuditAction.unassign, "EmployeeScheduleAssignment", assignment_id,
            f"Unassigned schedule; removed {removed} draft shifts",
            before=before,
            after=snapshot(assignment),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Unassigned %s, removed %s drafts", assignment_id, removed)
    return removed


def assignment_history(db: Session, employee_id: UUID) -> list[AssignmentOut]:
    _require_employee(db, employee_id)
    rows = db.execute(
        select(ScheduleAssignment, ScheduleTemplate.name)
        .join(ScheduleTemplate, ScheduleTemplate.template_id == ScheduleAssignment.template_id)
        .where(ScheduleAssignment.employee_id == employee_id)
        .order_by(ScheduleAssignment.effective_start_date.desc(), ScheduleAssignment.created_at.desc())
    ).all()

    return [
        AssignmentOut(
            assignment_id=a.assignment_id,
            employee_id=a.employee_id,
            template_id=a.template_id,
            template_name=name,
            effective_start_date=a.effective_start_date,
            effective_end_date=a.effective_end_date,
            notes=a.notes,
            is_current=a.effective_end_date is None,
        )
        for a, name in rows
    ]
