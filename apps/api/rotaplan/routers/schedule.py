from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from rotaplan.core.database import get_db
from rotaplan.models.manager import Manager
from rotaplan.routers.auth import get_actor, get_current_manager
from rotaplan.scheduling.patterns import ShiftStatus
from rotaplan.schemas.schedule import (
    PublishBatchOut,
    PublishRequest,
    ShiftCreate,
    ShiftOut,
    ShiftSaveOut,
    ShiftUpdate,
)
from rotaplan.services.audit import Actor
from rotaplan.services.publishing import list_publish_batches, publish, select_draft_shifts
from rotaplan.services.shifts import create_shift, delete_shift, get_shift_or_404, list_shifts, update_shift

router = APIRouter()


@router.get("", response_model=list[ShiftOut])
def get_shifts(
    start_date: date = Query(...),
    end_date: date = Query(...),
    employee_id: Optional[UUID] = Query(None),
    status: Optional[ShiftStatus] = Query(None),
    location_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must be >= start_date")
    return list_shifts(db, start_date, end_date, employee_id=employee_id, status=status, location_id=location_id)


@router.post("", response_model=ShiftSaveOut)
def post_shift(
    payload: ShiftCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """
    Add a manual draft shift. Overlaps are rejected (409); an availability
    problem is returned alongside the saved shift as a warning.
    """
    shift, availability = create_shift(db, payload, actor)
    return ShiftSaveOut(shift=ShiftOut.model_validate(shift), availability=availability)


# Declared before /{shift_id} so "publish-batches" never parses as an id
@router.get("/publish-batches", response_model=list[PublishBatchOut])
def get_publish_batches(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    return list_publish_batches(db, limit=limit)


@router.post("/publish", response_model=PublishBatchOut)
def post_publish(
    req: PublishRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    drafts = select_draft_shifts(db, req.shift_ids, req.start_date, req.end_date)
    return publish(db, drafts, actor, notes=req.notes)


@router.get("/{shift_id}", response_model=ShiftOut)
def get_shift(
    shift_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    return get_shift_or_404(db, shift_id)


@router.patch("/{shift_id}", response_model=ShiftSaveOut)
def patch_shift(
    shift_id: UUID,
    payload: ShiftUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    shift, availability = update_shift(db, shift_id, payload, actor)
    return ShiftSaveOut(shift=ShiftOut.model_validate(shift), availability=availability)


@router.delete("/{shift_id}")
def remove_shift(
    shift_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    delete_shift(db, shift_id, actor)
    return {"deleted": True, "shift_id": str(shift_id)}
