import uuid
from sqlalchemy import Column, String, Date, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from rotaplan.core.database import Base

from rotaplan.models.location import Location  # noqa: F401

class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=True)  # NULL for employees without login yet

    # Shifts with no location override fall back to this one
    main_location_id = Column(
        Uuid,
        ForeignKey("locations.location_id", ondelete="SET NULL"),
        nullable=True,
    )

    hire_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
