# backend/models/log.py
from sqlalchemy import Column, String, Text, DateTime, JSON, func
from database import Base, new_id
from utils.time_utils import utcnow


# Append-only record of admin mutations
class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)

    # What was touched and how
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(64), nullable=False, index=True)
    action = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    author_name = Column(String, nullable=False, default="Admin")
    ip = Column(String(64), nullable=True)

    # JSON snapshots of the entity around the mutation
    before_data = Column(JSON, nullable=True)
    after_data = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True)
