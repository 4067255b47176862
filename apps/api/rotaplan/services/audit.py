"""
Append-only audit trail. Every mutating service writes exactly one record per
user-visible action; nothing in the scheduling logic reads these back.
"""
import enum
import logging
from typing import Any, Optional
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from sqlalchemy.orm import Session

from rotaplan.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


class AuditAction(str, enum.Enum):
    create = "create"
    update = "update"
    delete = "delete"
    approve = "approve"
    assign = "assign"
    unassign = "unassign"
    generate = "generate"


class Actor(BaseModel):
    """Who performed a mutation. Passed explicitly into every service call."""

    actor_id: Optional[UUID] = None
    email: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_manager(cls, manager) -> "Actor":
        return cls(actor_id=manager.manager_id, email=manager.email, name=manager.name or manager.email)


# never copied into audit data
_SECRET_COLUMNS = {"password_hash"}


def snapshot(row) -> dict[str, Any]:
    """Column values of an ORM row as JSON-safe data."""
    return jsonable_encoder(
        {c.key: getattr(row, c.key) for c in row.__table__.columns if c.key not in _SECRET_COLUMNS}
    )


def record_audit(
    db: Session,
    actor: Actor,
    action: AuditAction,
    entity_type: str,
    entity_id,
    description: str,
    before: Optional[dict] = None,
    after: Optional[dict] = None,
) -> AuditLog:
    """Stage an audit row on the caller's session; the caller commits."""
    entry = AuditLog(
        actor_id=actor.actor_id,
        actor_email=actor.email,
        actor_name=actor.name,
        action=action.value,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        description=description,
        before_data=before,
        after_data=after,
    )
    db.add(entry)
    logger.info("audit %s %s %s by %s: %s", action.value, entity_type, entity_id, actor.email, description)
    return entry
