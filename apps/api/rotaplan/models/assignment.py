import uuid
from sqlalchemy import Column, Date, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from rotaplan.core.database import Base

from rotaplan.models.employee import Employee  # noqa: F401
from rotaplan.models.schedule_template import ScheduleTemplate  # noqa: F401

class ScheduleAssignment(Base):
    __tablename__ = "schedule_assignments"

    assignment_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # RESTRICT: templates with history cannot be deleted
    template_id = Column(
        Uuid,
        ForeignKey("schedule_templates.template_id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    effective_start_date = Column(Date, nullable=False)
    effective_end_date = Column(Date, nullable=True)  # NULL = open-ended, at most one per employee
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
