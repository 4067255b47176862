import uuid
from sqlalchemy import Column, String, Text, JSON, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from rotaplan.core.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    audit_log_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    actor_id = Column(Uuid, nullable=True, index=True)
    actor_email = Column(String, nullable=True)
    actor_name = Column(String, nullable=True)

    action = Column(String, nullable=False)
    entity_type = Column(String, nullable=False)
    entity_id = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    before_data = Column(JSON, nullable=True)
    after_data = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
