import uuid
from sqlalchemy import Column, Time, Boolean, Date, Float, String, Enum, ForeignKey, Uuid

from rotaplan.core.database import Base
from rotaplan.scheduling.patterns import Weekday

from rotaplan.models.employee import Employee  # noqa: F401

class EmployeeAvailability(Base):
    __tablename__ = "employee_availability"

    availability_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    weekday = Column(Enum(Weekday, name="weekday"), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    available_start = Column(Time, nullable=True)
    available_end = Column(Time, nullable=True)
    max_hours = Column(Float, nullable=True, default=8)
    notes = Column(String, nullable=True)

    effective_date = Column(Date, nullable=True)
