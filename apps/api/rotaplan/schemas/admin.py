from pydantic import BaseModel, ConfigDict, EmailStr
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

class LocationCreate(BaseModel):
    name: str
    address: Optional[str] = None

class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    location_id: UUID
    name: str
    address: Optional[str] = None
    is_active: bool

class ManagerCreate(BaseModel):
    name: str
    email: EmailStr
    password: str

class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    audit_log_id: UUID
    actor_id: Optional[UUID] = None
    actor_email: Optional[str] = None
    actor_name: Optional[str] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    description: Optional[str] = None
    before_data: Optional[Any] = None
    after_data: Optional[Any] = None
    created_at: Optional[datetime] = None
