from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rotaplan.core.database import get_db
from rotaplan.models.employee import Employee
from rotaplan.routers.auth import get_current_employee
from rotaplan.scheduling.patterns import ShiftStatus
from rotaplan.schemas.schedule import ShiftOut
from rotaplan.services.shifts import list_shifts

router = APIRouter()


@router.get("/schedule")
def get_my_schedule(
    month_start: Optional[date] = Query(None),
    month_end: Optional[date] = Query(None),
    current_employee: Employee = Depends(get_current_employee),
    db: Session = Depends(get_db),
):
    """
    Get the current employee's published shifts for a date range.
    If no dates provided, returns current month.
    """
    if not month_start:
        today = date.today()
        month_start = date(today.year, today.month, 1)
    if not month_end:
        # Last day of month
        if month_start.month == 12:
            month_end = date(month_start.year + 1, 1, 1) - timedelta(days=1)
        else:
            month_end = date(month_start.year, month_start.month + 1, 1) - timedelta(days=1)

    shifts = list_shifts(
        db,
        month_start,
        month_end,
        employee_id=current_employee.employee_id,
        status=ShiftStatus.published,
    )

    return {
        "employee_id": str(current_employee.employee_id),
        "employee_name": current_employee.name,
        "month_start": month_start,
        "month_end": month_end,
        "shifts": [ShiftOut.model_validate(s) for s in shifts],
    }
