from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from rotaplan.scheduling.conflicts import AvailabilityCheck
from rotaplan.scheduling.patterns import (
    RotationWeek,
    ShiftSource,
    ShiftStatus,
    TemplateStatus,
)


# --- Templates ---
class TemplateUpsert(BaseModel):
    name: str
    description: Optional[str] = None
    status: TemplateStatus = TemplateStatus.active
    is_default: bool = False
    rotation_length_weeks: int = 1
    weeks: list[RotationWeek] = Field(default_factory=list)


class TemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    template_id: UUID
    name: str
    description: Optional[str] = None
    status: TemplateStatus
    is_default: bool
    rotation_length_weeks: int
    weeks: list[RotationWeek] = Field(default_factory=list)
    active_assignment_count: int = 0


# --- Assignments ---
class AssignmentCreate(BaseModel):
    template_id: UUID
    effective_start_date: date
    effective_end_date: Optional[date] = None
    notes: Optional[str] = None


class AssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: UUID
    employee_id: UUID
    template_id: UUID
    template_name: Optional[str] = None
    effective_start_date: date
    effective_end_date: Optional[date] = None
    notes: Optional[str] = None
    is_current: bool = False


# --- Custom schedules ---
class CustomScheduleCreate(BaseModel):
    employee_id: UUID
    name: str = "Custom Schedule"
    rotation_length_weeks: int = 1
    effective_start_date: date
    effective_end_date: Optional[date] = None
    weeks: list[RotationWeek] = Field(default_factory=list)


# --- Generation ---
class SkippedShift(BaseModel):
    shift_date: date
    start_time: time
    end_time: time
    reason: str


class RegenerationResult(BaseModel):
    employee_id: UUID
    source: str  # "template" | "custom" | "none"
    removed: int = 0
    created: int = 0
    skipped: list[SkippedShift] = Field(default_factory=list)


# --- Shifts ---
class ShiftCreate(BaseModel):
    employee_id: UUID
    shift_date: date
    start_time: time
    end_time: time
    break_minutes: int = 30
    expected_hours: float = 7.6
    location_id: Optional[UUID] = None
    notes: Optional[str] = None


class ShiftUpdate(BaseModel):
    employee_id: Optional[UUID] = None
    shift_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    break_minutes: Optional[int] = None
    expected_hours: Optional[float] = None
    location_id: Optional[UUID] = None
    notes: Optional[str] = None


class ShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shift_id: UUID
    employee_id: UUID
    shift_date: date
    start_time: time
    end_time: time
    break_minutes: int
    expected_hours: float
    location_id: Optional[UUID] = None
    source: ShiftSource
    status: ShiftStatus
    template_assignment_id: Optional[UUID] = None
    custom_schedule_id: Optional[UUID] = None
    publish_batch_id: Optional[UUID] = None
    notes: Optional[str] = None


class ShiftSaveOut(BaseModel):
    shift: ShiftOut
    availability: AvailabilityCheck


# --- Publishing ---
class PublishRequest(BaseModel):
    # Either explicit shift ids, or every draft in [start_date, end_date]
    shift_ids: Optional[list[UUID]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class PublishBatchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    publish_batch_id: UUID
    published_by: Optional[UUID] = None
    published_at: datetime
    shifts_count: int
    affected_employee_ids: list[str]
    notes: Optional[str] = None
