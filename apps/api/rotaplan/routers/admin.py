from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Optional

from rotaplan.core.database import get_db
from rotaplan.routers.auth import get_actor, get_current_manager, get_password_hash
from rotaplan.schemas.admin import AuditLogOut, LocationCreate, LocationOut, ManagerCreate
from rotaplan.models.audit_log import AuditLog
from rotaplan.models.location import Location
from rotaplan.models.manager import Manager
from rotaplan.services.audit import Actor, AuditAction, record_audit, snapshot

router = APIRouter()


# --- Locations ---
@router.post("/locations", response_model=LocationOut)
def create_location(
    payload: LocationCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    loc = Location(name=payload.name, address=payload.address)
    db.add(loc)
    db.flush()
    record_audit(db, actor, AuditAction.create, "Location", loc.location_id, f"Created location {loc.name}",
                 after=snapshot(loc))
    db.commit()
    db.refresh(loc)
    return loc


@router.get("/locations", response_model=list[LocationOut])
def list_locations(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    stmt = select(Location).order_by(Location.name.asc())
    if not include_inactive:
        stmt = stmt.where(Location.is_active == True)  # noqa: E712
    return db.execute(stmt).scalars().all()


# --- Managers ---
@router.post("/managers")
def create_manager(
    payload: ManagerCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Create another schedule administrator."""
    email = payload.email.lower()
    existing = db.execute(select(Manager).where(Manager.email == email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=400, detail="A manager with this email already exists")

    m = Manager(name=payload.name, email=email, password_hash=get_password_hash(payload.password))
    db.add(m)
    db.flush()
    record_audit(db, actor, AuditAction.create, "Manager", m.manager_id, f"Created manager {m.email}")
    db.commit()
    db.refresh(m)
    return {"manager_id": str(m.manager_id), "name": m.name, "email": m.email}


# --- Audit ---
@router.get("/audit-logs", response_model=list[AuditLogOut])
def list_audit_logs(
    entity_type: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    """Newest first."""
    stmt = select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)
    if entity_type:
        stmt = stmt.where(AuditLog.entity_type == entity_type)
    return db.execute(stmt).scalars().all()
