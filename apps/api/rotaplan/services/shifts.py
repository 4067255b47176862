from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from rotaplan.models.availability import EmployeeAvailability
from rotaplan.models.employee import Employee
from rotaplan.models.location import Location
from rotaplan.models.scheduled_shifts import ScheduledShift
from rotaplan.scheduling.conflicts import (
    AvailabilityCheck,
    AvailabilityWindow,
    check_availability,
    check_overlap,
)
from rotaplan.scheduling.patterns import WEEKDAYS, GeneratedShift, ShiftSource, ShiftStatus
from rotaplan.schemas.schedule import ShiftCreate, ShiftUpdate
from rotaplan.services.audit import Actor, AuditAction, record_audit, snapshot
from rotaplan.services.validators import validate_break, validate_time_range

logger = logging.getLogger(__name__)


# ---------- lookups ----------
def get_shift_or_404(db: Session, shift_id: UUID) -> ScheduledShift:
    shift = db.get(ScheduledShift, shift_id)
    if not shift:
        raise HTTPException(status_code=404, detail="Scheduled shift not found")
    return shift


def _require_active_employee(db: Session, employee_id: UUID) -> Employee:
    employee = db.get(Employee, employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    if not employee.is_active:
        raise HTTPException(status_code=400, detail="Employee is not active")
    return employee


def shifts_on_day(db: Session, employee_id: UUID, shift_date: date) -> list[GeneratedShift]:
    """The employee's shifts for one date, in insertion order."""
    rows = db.execute(
        select(ScheduledShift)
        .where(and_(ScheduledShift.employee_id == employee_id, ScheduledShift.shift_date == shift_date))
        .order_by(ScheduledShift.created_at, ScheduledShift.shift_id)
    ).scalars().all()
    return [GeneratedShift.model_validate(r) for r in rows]


def availability_for(db: Session, employee_id: UUID, shift_date: date) -> Optional[AvailabilityWindow]:
    weekday = WEEKDAYS[shift_date.weekday()]
    row = db.execute(
        select(EmployeeAvailability).where(
            and_(
                EmployeeAvailability.employee_id == employee_id,
                EmployeeAvailability.weekday == weekday,
            )
        )
    ).scalars().first()
    return AvailabilityWindow.model_validate(row) if row else None


def list_shifts(
    db: Session,
    start_date: date,
    end_date: date,
    employee_id: Optional[UUID] = None,
    status: Optional[ShiftStatus] = None,
    location_id: Optional[UUID] = None,
) -> list[ScheduledShift]:
    conditions = [ScheduledShift.shift_date >= start_date, ScheduledShift.shift_date <= end_date]
    if employee_id is not None:
        conditions.append(ScheduledShift.employee_id == employee_id)
    if status is not None:
        conditions.append(ScheduledShift.status == status)
    if location_id is not None:
        conditions.append(ScheduledShift.location_id == location_id)

    return db.execute(
        select(ScheduledShift)
        .where(and_(*conditions))
        .order_by(ScheduledShift.shift_date, ScheduledShift.start_time, ScheduledShift.employee_id)
    ).scalars().all()


# ---------- checks ----------
def _validate_candidate(db: Session, candidate: GeneratedShift) -> None:
    try:
        validate_time_range(candidate.start_time, candidate.end_time)
        validate_break(candidate.start_time, candidate.end_time, candidate.break_minutes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if candidate.expected_hours < 0:
        raise HTTPException(status_code=400, detail="expected_hours must be >= 0")
    if candidate.location_id is not None and not db.get(Location, candidate.location_id):
        raise HTTPException(status_code=404, detail="Location not found")


def _raise_on_overlap(db: Session, candidate: GeneratedShift) -> None:
    existing = shifts_on_day(db, candidate.employee_id, candidate.shift_date)
    conflict = check_overlap(candidate, existing, exclude_shift_id=candidate.shift_id)
    if conflict is not None:
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Shift overlaps an existing shift for this employee",
                "conflicting_shift_id": str(conflict.conflicting_shift.shift_id),
                "reason": conflict.reason,
            },
        )


# ---------- mutations ----------
# columns a shift cannot be without; an explicit null in an edit is rejected
_REQUIRED_FIELDS = ("employee_id", "shift_date", "start_time", "end_time", "break_minutes", "expected_hours")


def create_shift(db: Session, payload: ShiftCreate, actor: Actor) -> tuple[ScheduledShift, AvailabilityCheck]:
    employee = _require_active_employee(db, payload.employee_id)

    candidate = GeneratedShift(
        employee_id=payload.employee_id,
        shift_date=payload.shift_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        break_minutes=payload.break_minutes,
        expected_hours=payload.expected_hours,
        location_id=payload.location_id or employee.main_location_id,
        source=ShiftSource.manual,
        status=ShiftStatus.draft,
    )
    _validate_candidate(db, candidate)
    _raise_on_overlap(db, candidate)
    advisory = check_availability(candidate, availability_for(db, candidate.employee_id, candidate.shift_date))

    try:
        shift = ScheduledShift(**candidate.model_dump(exclude={"shift_id"}), notes=payload.notes)
        db.add(shift)
        db.flush()

        record_audit(
            db, actor, AuditAction.create, "ScheduledShift", shift.shift_id,
            f"Shift for {payload.shift_date.isoformat()}",
            after=snapshot(shift),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(shift)
    return shift, advisory


def update_shift(
    db: Session, shift_id: UUID, payload: ShiftUpdate, actor: Actor
) -> tuple[ScheduledShift, AvailabilityCheck]:
    """
    Edit a shift. Edited template shifts become overrides so regeneration
    leaves them alone; every edit returns the shift to draft.
    """
    shift = get_shift_or_404(db, shift_id)
    changes = payload.model_dump(exclude_unset=True)
    notes = changes.pop("notes", shift.notes)

    nulled = [key for key in _REQUIRED_FIELDS if key in changes and changes[key] is None]
    if nulled:
        raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(nulled)}")

    if "employee_id" in changes:
        _require_active_employee(db, changes["employee_id"])

    current = GeneratedShift.model_validate(shift)
    source = ShiftSource.override if current.source == ShiftSource.template else current.source
    candidate = current.model_copy(
        update={**changes, "source": source, "status": ShiftStatus.draft, "publish_batch_id": None}
    )
    # re-run field validation on the merged values
    try:
        candidate = GeneratedShift.model_validate(candidate.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _validate_candidate(db, candidate)
    _raise_on_overlap(db, candidate)
    advisory = check_availability(candidate, availability_for(db, candidate.employee_id, candidate.shift_date))

    before = snapshot(shift)
    try:
        for key, value in candidate.model_dump(exclude={"shift_id"}).items():
            setattr(shift, key, value)
        shift.notes = notes
        db.flush()

        record_audit(
            db, actor, AuditAction.update, "ScheduledShift", shift.shift_id,
            f"Shift for {shift.shift_date.isoformat()}",
            before=before,
            after=snapshot(shift),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(shift)
    return shift, advisory


def delete_shift(db: Session, shift_id: UUID, actor: Actor) -> None:
    shift = get_shift_or_404(db, shift_id)
    before = snapshot(shift)
    try:
        db.delete(shift)
        record_audit(
            db, actor, AuditAction.delete, "ScheduledShift", shift_id,
            f"Deleted shift for {before['shift_date']}",
            before=before,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
