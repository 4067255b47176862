from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from rotaplan.core.database import get_db
from rotaplan.models.manager import Manager
from rotaplan.routers.auth import get_actor, get_current_manager
from rotaplan.scheduling.generator import PreviewWeek, preview_rotation
from rotaplan.scheduling.patterns import (
    MAX_ROTATION_WEEKS,
    MIN_ROTATION_WEEKS,
    WEEK_LABELS,
    RotationWeek,
    TemplateStatus,
    blank_weeks,
)
from rotaplan.schemas.schedule import RegenerationResult, TemplateOut, TemplateUpsert
from rotaplan.services.audit import Actor
from rotaplan.services.shift_generation import regenerate_for_template
from rotaplan.services.templates import (
    active_assignment_counts,
    create_template,
    delete_template,
    get_template_or_404,
    is_template_referenced,
    list_templates,
    template_out,
    template_to_domain,
    update_template,
)

router = APIRouter()


@router.get("", response_model=list[TemplateOut])
def get_templates(
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    return list_templates(db)


@router.get("/blank", response_model=list[RotationWeek])
def get_blank_weeks(
    rotation_length_weeks: int = Query(1, ge=MIN_ROTATION_WEEKS, le=MAX_ROTATION_WEEKS),
    current_manager: Manager = Depends(get_current_manager),
):
    """Default week grid for a new rotation (Mon-Fri working, weekends off)."""
    return blank_weeks(rotation_length_weeks)


@router.get("/week-labels")
def get_week_labels():
    return {"week_labels": WEEK_LABELS}


@router.post("", response_model=TemplateOut)
def post_template(
    payload: TemplateUpsert,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    t = create_template(db, payload, actor)
    return template_out(t)


@router.get("/{template_id}", response_model=TemplateOut)
def get_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    t = get_template_or_404(db, template_id)
    return template_out(t, active_assignment_counts(db).get(t.template_id, 0))


@router.put("/{template_id}", response_model=TemplateOut)
def put_template(
    template_id: UUID,
    payload: TemplateUpsert,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """
    Replace a template's header and week grid.
    Existing shifts are untouched until the template is regenerated.
    """
    t = update_template(db, template_id, payload, actor)
    return template_out(t, active_assignment_counts(db).get(t.template_id, 0))


@router.delete("/{template_id}")
def remove_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    delete_template(db, template_id, actor)
    return {"deleted": True, "template_id": str(template_id)}


@router.get("/{template_id}/referenced")
def get_template_referenced(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    get_template_or_404(db, template_id)
    return {"template_id": str(template_id), "referenced": is_template_referenced(db, template_id)}


@router.get("/{template_id}/preview", response_model=list[PreviewWeek])
def get_template_preview(
    template_id: UUID,
    start_date: date = Query(...),
    weeks: int = Query(6, ge=1, le=26),
    week_offset: int = Query(0),
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    """What the rotation would look like if assigned on start_date."""
    t = get_template_or_404(db, template_id)
    return preview_rotation(template_to_domain(t), start_date, weeks=weeks, week_offset=week_offset)


@router.post("/{template_id}/regenerate", response_model=list[RegenerationResult])
def regenerate_template_shifts(
    template_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Rebuild draft shifts for everyone currently on this template."""
    t = get_template_or_404(db, template_id)
    if t.status != TemplateStatus.active:
        raise HTTPException(status_code=400, detail="Template is inactive")
    return regenerate_for_template(db, template_id, actor)
