# backend/models/users.py
import enum
from sqlalchemy import Column, String, Boolean, DateTime, func
from database import Base, new_id
from utils.time_utils import utcnow


class AdminRole(str, enum.Enum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    READONLY = "READONLY"


# Back-office account with its own bcrypt password
class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=AdminRole.ADMIN.value)
    active = Column(Boolean, nullable=False, default=True)

    # bcrypt hash of the one-time reset token, never the raw value
    reset_token = Column(String, nullable=True)
    reset_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())
