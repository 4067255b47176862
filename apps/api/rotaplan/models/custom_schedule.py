import uuid
from sqlalchemy import (
    Column, String, Integer, Boolean, Float, Date, Time, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from rotaplan.core.database import Base
from rotaplan.scheduling.patterns import TemplateStatus, Weekday

from rotaplan.models.employee import Employee  # noqa: F401
from rotaplan.models.location import Location  # noqa: F401


class CustomSchedule(Base):
    """A rotation owned by one employee; takes precedence over template assignments."""

    __tablename__ = "custom_schedules"

    custom_schedule_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id = Column(
        Uuid,
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False, default="Custom Schedule")
    rotation_length_weeks = Column(Integer, nullable=False, default=1)
    effective_start_date = Column(Date, nullable=False)
    effective_end_date = Column(Date, nullable=True)
    status = Column(Enum(TemplateStatus, name="template_status"), nullable=False, default=TemplateStatus.active)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    weeks = relationship(
        "CustomScheduleWeek",
        back_populates="custom_schedule",
        cascade="all, delete-orphan",
        order_by="CustomScheduleWeek.week_index",
    )


class CustomScheduleWeek(Base):
    __tablename__ = "custom_schedule_weeks"

    custom_schedule_week_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    custom_schedule_id = Column(
        Uuid,
        ForeignKey("custom_schedules.custom_schedule_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    week_index = Column(Integer, nullable=False)
    week_label = Column(String, nullable=True)

    custom_schedule = relationship("CustomSchedule", back_populates="weeks")
    days = relationship("CustomScheduleDay", back_populates="week", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("custom_schedule_id", "week_index", name="uq_custom_schedule_weeks_index"),
    )


class CustomScheduleDay(Base):
    __tablename__ = "custom_schedule_days"

    custom_schedule_day_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    custom_schedule_week_id = Column(
        Uuid,
        ForeignKey("custom_schedule_weeks.custom_schedule_week_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    weekday = Column(Enum(Weekday, name="weekday"), nullable=False)
    is_working_day = Column(Boolean, nullable=False, default=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    break_minutes = Column(Integer, nullable=False, default=30)
    expected_hours = Column(Float, nullable=False, default=0)
    location_id = Column(Uuid, ForeignKey("locations.location_id", ondelete="SET NULL"), nullable=True)

    week = relationship("CustomScheduleWeek", back_populates="days")

    __table_args__ = (
        UniqueConstraint("custom_schedule_week_id", "weekday", name="uq_custom_schedule_days_weekday"),
    )
