from pydantic import BaseModel, ConfigDict, EmailStr
from datetime import date
from typing import Optional
from uuid import UUID

class EmployeeCreate(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    hire_date: Optional[date] = None
    main_location_id: Optional[UUID] = None
    is_active: bool = True

class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    hire_date: Optional[date] = None
    main_location_id: Optional[UUID] = None
    is_active: Optional[bool] = None

class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    hire_date: Optional[date] = None
    main_location_id: Optional[UUID] = None
    is_active: bool
