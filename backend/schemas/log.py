# backend/schemas/log.py
from datetime import datetime
from typing import Any, Optional

from schemas.base import ORMBase


class AuditLogOut(ORMBase):
    id: str
    entity_type: str
    entity_id: str
    action: str
    description: Optional[str] = None
    author_name: str
    ip: Optional[str] = None
    before_data: Optional[Any] = None
    after_data: Optional[Any] = None
    created_at: datetime
