# backend/routes/settings.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas.settings import SettingsMap, SettingsPatch
from services import settings_service
from utils.audit import log_admin_action
from utils.tokenJWT import AdminPrincipal, get_current_admin, require_writer

router = APIRouter(prefix="/api/admin/settings", tags=["Settings"])


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@router.get("", response_model=SettingsMap)
def get_settings(db: Session = Depends(get_db), admin: AdminPrincipal = Depends(get_current_admin)):
    return settings_service.get_all(db)


@router.patch("", response_model=SettingsMap)
def update_settings(
    payload: SettingsPatch,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminPrincipal = Depends(require_writer),
):
    changes = {key: _as_text(value) for key, value in payload.root.items()}
    settings_service.validate_changes(changes)

    before = settings_service.get_all(db)
    for key, value in changes.items():
        settings_service.set_setting(db, key, value)
    db.commit()

    log_admin_action(db, request, admin, entity_type="settings", entity_id="store", action="update",
                     description=f"Updated settings: {', '.join(sorted(changes))}",
                     before={k: before.get(k) for k in changes}, after=changes)
    return settings_service.get_all(db)
