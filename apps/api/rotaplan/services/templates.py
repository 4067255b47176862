from __future__ import annotations

import logging
from typing import Iterable
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rotaplan.models.assignment import ScheduleAssignment
from rotaplan.models.location import Location
from rotaplan.models.schedule_template import ScheduleDay, ScheduleTemplate, ScheduleWeek
from rotaplan.scheduling.patterns import WEEKDAYS, RotationTemplate, RotationWeek, WeekdayPattern
from rotaplan.scheduling.validation import validate_template
from rotaplan.schemas.schedule import TemplateOut, TemplateUpsert
from rotaplan.services.audit import Actor, AuditAction, record_audit, snapshot

logger = logging.getLogger(__name__)


# ---------- conversion ----------
def week_from_row(row) -> RotationWeek:
    """ORM week (template or custom) -> RotationWeek with days in Mon..Sun order."""
    days = sorted(
        (WeekdayPattern.model_validate(d) for d in row.days),
        key=lambda d: WEEKDAYS.index(d.weekday),
    )
    return RotationWeek(week_index=row.week_index, week_label=row.week_label, days=days)


def template_to_domain(row: ScheduleTemplate) -> RotationTemplate:
    return RotationTemplate(
        template_id=row.template_id,
        name=row.name,
        description=row.description,
        status=row.status,
        is_default=row.is_default,
        rotation_length_weeks=row.rotation_length_weeks,
        weeks=[week_from_row(w) for w in row.weeks],
    )


def template_out(row: ScheduleTemplate, active_assignment_count: int = 0) -> TemplateOut:
    domain = template_to_domain(row)
    return TemplateOut(
        **domain.model_dump(exclude={"template_id"}),
        template_id=row.template_id,
        active_assignment_count=active_assignment_count,
    )


def raise_if_invalid(rotation: RotationTemplate, db: Session, what: str = "Template") -> None:
    violations = validate_template(rotation) + unknown_locations(db, rotation.weeks)
    if violations:
        raise HTTPException(
            status_code=400,
            detail={"message": f"{what} is invalid", "violations": violations},
        )


def unknown_locations(db: Session, weeks: Iterable[RotationWeek]) -> list[str]:
    wanted = {d.location_id for w in weeks for d in w.days if d.location_id is not None}
    if not wanted:
        return []
    found = set(db.execute(select(Location.location_id).where(Location.location_id.in_(wanted))).scalars())
    return [f"unknown location_id {loc}" for loc in sorted(wanted - found, key=str)]


def _build_weeks(weeks: Iterable[RotationWeek]) -> list[ScheduleWeek]:
    out = []
    for w in weeks:
        out.append(
            ScheduleWeek(
                week_index=w.week_index,
                week_label=w.week_label,
                days=[ScheduleDay(**d.model_dump()) for d in w.days],
            )
        )
    return out


def _clear_other_defaults(db: Session, keep_template_id=None) -> None:
    stmt = select(ScheduleTemplate).where(ScheduleTemplate.is_default == True)  # noqa: E712
    for t in db.execute(stmt).scalars():
        if t.template_id != keep_template_id:
            t.is_default = False


# ---------- queries ----------
def get_template_or_404(db: Session, template_id: UUID) -> ScheduleTemplate:
    t = db.get(ScheduleTemplate, template_id)
    if not t:
        raise HTTPException(status_code=404, detail="Schedule template not found")
    return t


def is_template_referenced(db: Session, template_id: UUID) -> bool:
    """True when any assignment, open or closed, points at the template."""
    stmt = select(ScheduleAssignment.assignment_id).where(ScheduleAssignment.template_id == template_id).limit(1)
    return db.execute(stmt).first() is not None


def active_assignment_counts(db: Session) -> dict[UUID, int]:
    rows = db.execute(
        select(ScheduleAssignment.template_id, func.count(ScheduleAssignment.assignment_id))
        .where(ScheduleAssignment.effective_end_date.is_(None))
        .group_by(ScheduleAssignment.template_id)
    ).all()
    return {template_id: count for template_id, count in rows}


def list_templates(db: Session) -> list[TemplateOut]:
    counts = active_assignment_counts(db)
    rows = db.execute(select(ScheduleTemplate).order_by(ScheduleTemplate.name.asc())).scalars().all()
    return [template_out(t, counts.get(t.template_id, 0)) for t in rows]


# ---------- mutations ----------
def create_template(db: Session, payload: TemplateUpsert, actor: Actor) -> ScheduleTemplate:
    rotation = RotationTemplate(**payload.model_dump())
    raise_if_invalid(rotation, db)

    if payload.is_default:
        _clear_other_defaults(db)

    t = ScheduleTemplate(
        name=payload.name,
        description=payload.description,
        status=payload.status,
        is_default=payload.is_default,
        rotation_length_weeks=payload.rotation_length_weeks,
        weeks=_build_weeks(payload.weeks),
    )
    db.add(t)
    db.flush()

    record_audit(
        db, actor, AuditAction.create, "ScheduleTemplate", t.template_id,
        f"Created template {t.name} ({t.rotation_length_weeks}-week rotation)",
        after=template_to_domain(t).model_dump(mode="json"),
    )
    db.commit()
    db.refresh(t)
    logger.info("Created template %s (%s)", t.template_id, t.name)
    return t


def update_template(db: Session, template_id: UUID, payload: TemplateUpsert, actor: Actor) -> ScheduleTemplate:
    t = get_template_or_404(db, template_id)

    rotation = RotationTemplate(**payload.model_dump())
    raise_if_invalid(rotation, db)

    before = template_to_domain(t).model_dump(mode="json")

    if payload.is_default:
        _clear_other_defaults(db, keep_template_id=t.template_id)

    t.name = payload.name
    t.description = payload.description
    t.status = payload.status
    t.is_default = payload.is_default
    t.rotation_length_weeks = payload.rotation_length_weeks

    # Weeks and days are replaced wholesale. Flush the orphan deletes first so
    # the (template_id, week_index) unique constraint never sees both copies.
    t.weeks.clear()
    db.flush()
    t.weeks.extend(_build_weeks(payload.weeks))
    db.flush()

    record_audit(
        db, actor, AuditAction.update, "ScheduleTemplate", t.template_id,
        f"Updated template {t.name}",
        before=before,
        after=template_to_domain(t).model_dump(mode="json"),
    )
    db.commit()
    db.refresh(t)
    return t


def delete_template(db: Session, template_id: UUID, actor: Actor) -> None:
    t = get_template_or_404(db, template_id)

    if is_template_referenced(db, template_id):
        raise HTTPException(
            status_code=409,
            detail="Template is referenced by employee schedule assignments and cannot be deleted",
        )

    before = snapshot(t)
    name = t.name
    db.delete(t)
    record_audit(
        db, actor, AuditAction.delete, "ScheduleTemplate", template_id,
        f"Deleted template {name}",
        before=before,
    )
    db.commit()
    logger.info("Deleted template %s (%s)", template_id, name)
