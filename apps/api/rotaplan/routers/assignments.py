from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rotaplan.core.database import get_db
from rotaplan.routers.auth import get_actor
from rotaplan.services.assignments import unassign
from rotaplan.services.audit import Actor

router = APIRouter()


@router.post("/{assignment_id}/unassign")
def post_unassign(
    assignment_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """End the assignment today and remove the draft shifts it generated."""
    removed = unassign(db, assignment_id, actor)
    return {"assignment_id": str(assignment_id), "removed_draft_shifts": removed}
