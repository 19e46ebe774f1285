# backend/utils/audit.py
import logging
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.log import AuditLog

logger = logging.getLogger(__name__)


# Column values of an ORM row as a JSON-ready dict
def snapshot(obj: Any) -> Optional[dict]:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return jsonable_encoder(obj)
    mapper = inspect(obj).mapper
    return jsonable_encoder({attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs})


def write_log(
    db: Session,
    *,
    entity_type: str,
    entity_id: str,
    action: str,
    description: Optional[str] = None,
    before: Any = None,
    after: Any = None,
    author: str = "Admin",
    ip: Optional[str] = None,
) -> Optional[AuditLog]:
    """Append an audit entry. Call after the parent mutation has committed.

    Audit completeness is best-effort: a failed write is rolled back and
    logged, and the caller's operation still succeeds.
    """
    try:
        entry = AuditLog(
            entity_type=entity_type,
            entity_id=str(entity_id),
            action=action,
            description=description,
            author_name=author or "Admin",
            ip=ip,
            before_data=snapshot(before),
            after_data=snapshot(after),
        )
        db.add(entry)
        db.commit()
        return entry
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Audit log write failed for %s %s (%s)", entity_type, entity_id, action)
        return None


def request_ip(request) -> Optional[str]:
    return request.client.host if request is not None and request.client else None


# write_log with the author and IP taken from the current admin request
def log_admin_action(db: Session, request, admin, **fields) -> Optional[AuditLog]:
    return write_log(db, author=getattr(admin, "name", None) or "Admin", ip=request_ip(request), **fields)
