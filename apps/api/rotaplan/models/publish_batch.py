import uuid
from sqlalchemy import Column, Integer, Text, JSON, ForeignKey, Uuid
from sqlalchemy.sql.sqltypes import DateTime

from rotaplan.core.database import Base

from rotaplan.models.manager import Manager  # noqa: F401


class SchedulePublishBatch(Base):
    """Audit record of one publish; never updated after insert."""

    __tablename__ = "schedule_publish_batches"

    publish_batch_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    published_by = Column(Uuid, ForeignKey("managers.manager_id", ondelete="SET NULL"), nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=False)

    shifts_count = Column(Integer, nullable=False)
    affected_employee_ids = Column(JSON, nullable=False, default=list)  # list of employee id strings
    notes = Column(Text, nullable=True)
