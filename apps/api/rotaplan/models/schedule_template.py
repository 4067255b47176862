import uuid
from sqlalchemy import (
    Column, String, Text, Integer, Boolean, Float, Time, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from rotaplan.core.database import Base
from rotaplan.scheduling.patterns import TemplateStatus, Weekday

from rotaplan.models.location import Location  # noqa: F401


class ScheduleTemplate(Base):
    __tablename__ = "schedule_templates"

    template_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum(TemplateStatus, name="template_status"), nullable=False, default=TemplateStatus.active)
    is_default = Column(Boolean, nullable=False, default=False)
    rotation_length_weeks = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    weeks = relationship(
        "ScheduleWeek",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="ScheduleWeek.week_index",
    )


class ScheduleWeek(Base):
    __tablename__ = "schedule_weeks"

    schedule_week_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    template_id = Column(
        Uuid,
        ForeignKey("schedule_templates.template_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    week_index = Column(Integer, nullable=False)  # 1-based position in the rotation
    week_label = Column(String, nullable=True)

    template = relationship("ScheduleTemplate", back_populates="weeks")
    days = relationship("ScheduleDay", back_populates="week", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("template_id", "week_index", name="uq_schedule_weeks_template_index"),
    )


class ScheduleDay(Base):
    __tablename__ = "schedule_days"

    schedule_day_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    schedule_week_id = Column(
        Uuid,
        ForeignKey("schedule_weeks.schedule_week_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    weekday = Column(Enum(Weekday, name="weekday"), nullable=False)
    is_working_day = Column(Boolean, nullable=False, default=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    break_minutes = Column(Integer, nullable=False, default=30)
    expected_hours = Column(Float, nullable=False, default=0)

    # NULL -> employee's main location
    location_id = Column(Uuid, ForeignKey("locations.location_id", ondelete="SET NULL"), nullable=True)

    week = relationship("ScheduleWeek", back_populates="days")

    __table_args__ = (
        UniqueConstraint("schedule_week_id", "weekday", name="uq_schedule_days_week_weekday"),
    )
