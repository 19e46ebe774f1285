# backend/routes/logs.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.log import AuditLog
from schemas.log import AuditLogOut
from utils.tokenJWT import AdminPrincipal, get_current_admin

router = APIRouter(prefix="/api/admin/audit-logs", tags=["Logs"])


@router.get("", response_model=List[AuditLogOut])
def get_audit_logs(
    entity_type: Optional[str] = Query(None, description="Filter by entity type"),
    entity_id: Optional[str] = Query(None, description="Filter by entity ID"),
    action: Optional[str] = Query(None, description="Filter by action"),
    limit: int = Query(200, ge=1, le=1000),
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(get_current_admin),
):
    query = db.query(AuditLog)

    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)
    if entity_id:
        query = query.filter(AuditLog.entity_id == entity_id)
    if action:
        query = query.filter(AuditLog.action == action)

    # Newest first
    return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()
