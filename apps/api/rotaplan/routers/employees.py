from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from rotaplan.core.database import get_db
from rotaplan.models.availability import EmployeeAvailability
from rotaplan.models.employee import Employee
from rotaplan.models.location import Location
from rotaplan.models.manager import Manager
from rotaplan.routers.auth import get_actor, get_current_manager, get_password_hash
from rotaplan.scheduling.patterns import WEEKDAYS, CustomSchedule
from rotaplan.schemas.availability import AvailabilityDay, AvailabilityReplace
from rotaplan.schemas.employees import EmployeeCreate, EmployeeOut, EmployeeUpdate
from rotaplan.schemas.schedule import AssignmentCreate, AssignmentOut, RegenerationResult
from rotaplan.services.assignments import assign_template, assignment_history
from rotaplan.services.audit import Actor, AuditAction, record_audit, snapshot
from rotaplan.services.custom_schedules import list_for_employee
from rotaplan.services.shift_generation import (
    custom_schedule_to_domain,
    load_schedule_source,
    regenerate_shifts_for_employee,
)

router = APIRouter()


class PasswordSet(BaseModel):
    password: str


def _require_employee(db: Session, employee_id: UUID) -> Employee:
    emp = db.get(Employee, employee_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


def _check_location(db: Session, location_id) -> None:
    if location_id is not None and not db.get(Location, location_id):
        raise HTTPException(status_code=404, detail="Location not found")


# --- Employees ---
@router.post("", response_model=EmployeeOut)
def create_employee(
    payload: EmployeeCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    email = payload.email.lower()
    if db.execute(select(Employee).where(Employee.email == email)).scalar_one_or_none():
        raise HTTPException(status_code=400, detail="An employee with this email already exists")
    _check_location(db, payload.main_location_id)

    emp = Employee(
        name=payload.name,
        email=email,
        phone=payload.phone,
        hire_date=payload.hire_date,
        main_location_id=payload.main_location_id,
        is_active=payload.is_active,
    )
    db.add(emp)
    db.flush()
    record_audit(db, actor, AuditAction.create, "Employee", emp.employee_id, f"Created employee {emp.name}",
                 after=snapshot(emp))
    db.commit()
    db.refresh(emp)
    return emp


@router.get("", response_model=list[EmployeeOut])
def list_employees(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    stmt = select(Employee).order_by(Employee.name.asc())
    if not include_inactive:
        stmt = stmt.where(Employee.is_active == True)  # noqa: E712
    return db.execute(stmt).scalars().all()


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    return _require_employee(db, employee_id)


@router.patch("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: UUID,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    emp = _require_employee(db, employee_id)
    changes = payload.model_dump(exclude_unset=True)
    if "main_location_id" in changes:
        _check_location(db, changes["main_location_id"])
    if "email" in changes and changes["email"]:
        changes["email"] = changes["email"].lower()

    before = snapshot(emp)
    for key, value in changes.items():
        setattr(emp, key, value)
    db.flush()
    record_audit(db, actor, AuditAction.update, "Employee", emp.employee_id, f"Updated employee {emp.name}",
                 before=before, after=snapshot(emp))
    db.commit()
    db.refresh(emp)
    return emp


@router.post("/{employee_id}/password")
def set_employee_password(
    employee_id: UUID,
    payload: PasswordSet,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    """Set password for an employee (admin function)."""
    employee = _require_employee(db, employee_id)
    employee.password_hash = get_password_hash(payload.password)
    db.commit()
    return {"message": "Password set successfully"}


# --- Availability ---
@router.get("/{employee_id}/availability", response_model=list[AvailabilityDay])
def get_availability(
    employee_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    _require_employee(db, employee_id)
    rows = db.execute(
        select(EmployeeAvailability).where(EmployeeAvailability.employee_id == employee_id)
    ).scalars().all()
    return sorted(rows, key=lambda r: WEEKDAYS.index(r.weekday))


@router.put("/{employee_id}/availability", response_model=list[AvailabilityDay])
def replace_availability(
    employee_id: UUID,
    payload: AvailabilityReplace,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Replace the employee's whole weekly availability."""
    emp = _require_employee(db, employee_id)

    weekdays = [d.weekday for d in payload.days]
    if len(weekdays) != len(set(weekdays)):
        raise HTTPException(status_code=400, detail="Each weekday may appear only once")

    db.execute(delete(EmployeeAvailability).where(EmployeeAvailability.employee_id == employee_id))

    effective = payload.effective_date or date.today()
    for d in payload.days:
        db.add(
            EmployeeAvailability(
                employee_id=employee_id,
                weekday=d.weekday,
                is_available=d.is_available,
                available_start=d.available_start,
                available_end=d.available_end,
                max_hours=d.max_hours,
                notes=d.notes,
                effective_date=effective,
            )
        )

    record_audit(db, actor, AuditAction.update, "EmployeeAvailability", employee_id,
                 f"Saved availability for {emp.name}",
                 after={"days": [d.model_dump(mode="json") for d in payload.days]})
    db.commit()
    return sorted(payload.days, key=lambda d: WEEKDAYS.index(d.weekday))


# --- Schedule assignment ---
@router.get("/{employee_id}/assignments", response_model=list[AssignmentOut])
def list_assignments(
    employee_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    return assignment_history(db, employee_id)


@router.post("/{employee_id}/assignments")
def create_assignment(
    employee_id: UUID,
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    assignment, result = assign_template(db, employee_id, payload, actor)
    return {
        "assignment_id": str(assignment.assignment_id),
        "template_id": str(assignment.template_id),
        "effective_start_date": assignment.effective_start_date,
        "effective_end_date": assignment.effective_end_date,
        "generation": result,
    }


@router.post("/{employee_id}/regenerate", response_model=RegenerationResult)
def regenerate(
    employee_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return regenerate_shifts_for_employee(db, employee_id, actor)


@router.get("/{employee_id}/schedule-source")
def get_schedule_source(
    employee_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    """Which rotation currently drives this employee's generated shifts."""
    _require_employee(db, employee_id)
    return load_schedule_source(db, employee_id, date.today())


@router.get("/{employee_id}/custom-schedules", response_model=list[CustomSchedule])
def get_custom_schedules(
    employee_id: UUID,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager),
):
    _require_employee(db, employee_id)
    return [custom_schedule_to_domain(cs) for cs in list_for_employee(db, employee_id)]
