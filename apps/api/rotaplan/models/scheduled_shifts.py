import uuid
from sqlalchemy import Column, Date, ForeignKey, Integer, Float, Text, Time, Enum, Index, Uuid
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from rotaplan.core.database import Base
from rotaplan.scheduling.patterns import ShiftSource, ShiftStatus

from rotaplan.models.employee import Employee  # noqa: F401
from rotaplan.models.location import Location  # noqa: F401
from rotaplan.models.assignment import ScheduleAssignment  # noqa: F401
from rotaplan.models.custom_schedule import CustomSchedule  # noqa: F401
from rotaplan.models.publish_batch import SchedulePublishBatch  # noqa: F401


class ScheduledShift(Base):
    __tablename__ = "scheduled_shifts"

    shift_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(Uuid, ForeignKey("employees.employee_id", ondelete="CASCADE"), nullable=False)
    location_id = Column(Uuid, ForeignKey("locations.location_id", ondelete="SET NULL"), nullable=True)

    shift_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    break_minutes = Column(Integer, nullable=False, default=0)
    expected_hours = Column(Float, nullable=False, default=0)

    source = Column(Enum(ShiftSource, name="shift_source"), nullable=False, default=ShiftSource.manual)
    status = Column(Enum(ShiftStatus, name="shift_status"), nullable=False, default=ShiftStatus.draft)

    # Only set on template-sourced shifts
    template_assignment_id = Column(
        Uuid, ForeignKey("schedule_assignments.assignment_id", ondelete="SET NULL"), nullable=True
    )
    custom_schedule_id = Column(
        Uuid, ForeignKey("custom_schedules.custom_schedule_id", ondelete="SET NULL"), nullable=True
    )
    # Only set once published
    publish_batch_id = Column(
        Uuid, ForeignKey("schedule_publish_batches.publish_batch_id", ondelete="SET NULL"), nullable=True
    )

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_scheduled_shifts_employee_date", "employee_id", "shift_date"),
        Index("ix_scheduled_shifts_status_source", "status", "source"),
    )
