from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rotaplan.core.database import get_db
from rotaplan.models.manager import Manager
from rotaplan.routers.auth import get_actor, get_current_manager
from rotaplan.scheduling.patterns import CustomSchedule
from rotaplan.schemas.schedule import CustomScheduleCreate, RegenerationResult
from rotaplan.services.audit import Actor
from rotaplan.services.custom_schedules import (
    create_custom_schedule,
    deactivate_custom_schedule,
    get_custom_schedule_or_404,
)
from rotaplan.services.shift_generation import custom_schedule_to_domain

router = APIRouter()


@router.post("")
def post_custom_schedule(
    payload: CustomScheduleCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    cs, result = create_custom_schedule(db, payload, actor)
    return {
        "custom_schedule": custom_schedule_to_domain(cs),
        "generation": result,
    }


@router.get("/{custom_schedule_id}", response_model=CustomSchedule)
def get_custom_schedule(
    custom_schedule_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    return custom_schedule_to_domain(get_custom_schedule_or_404(db, custom_schedule_id))


@router.post("/{custom_schedule_id}/deactivate", response_model=RegenerationResult)
def post_deactivate(
    custom_schedule_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return deactivate_custom_schedule(db, custom_schedule_id, actor)
