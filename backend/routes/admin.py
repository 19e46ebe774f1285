# backend/routes/admin.py
import secrets
from datetime import timedelta
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.users import AdminUser, AdminRole
from schemas import user as schemas
from schemas.base import OkResponse
from utils.audit import log_admin_action, snapshot
from utils.hashing import get_password_hash, TOKEN_ROUNDS
from utils.time_utils import utcnow
from utils.tokenJWT import AdminPrincipal, role_required, MANAGER_ROLES

router = APIRouter(prefix="/api/admin/users", tags=["Admin users"])

RESET_TOKEN_TTL = timedelta(hours=24)

require_manager = role_required(*MANAGER_ROLES)


# Audit snapshot without credential hashes
def _public(user: AdminUser) -> dict:
    data = snapshot(user)
    data.pop("password_hash", None)
    data.pop("reset_token", None)
    return data


def _get_user(db: Session, user_id: str) -> AdminUser:
    user = db.query(AdminUser).filter(AdminUser.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin user not found")
    return user


# Only an owner may create, promote or modify another owner
def _check_owner_rights(current: AdminPrincipal, role) -> None:
    role = getattr(role, "value", role)
    if role == AdminRole.OWNER.value and current.role != AdminRole.OWNER.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


@router.get("", response_model=List[schemas.AdminUserOut])
def list_admin_users(db: Session = Depends(get_db), current: AdminPrincipal = Depends(require_manager)):
    return db.query(AdminUser).order_by(AdminUser.created_at.desc()).all()


@router.post("", response_model=schemas.AdminUserOut, status_code=status.HTTP_201_CREATED)
def create_admin_user(
    payload: schemas.AdminUserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current: AdminPrincipal = Depends(require_manager),
):
    _check_owner_rights(current, payload.role)
    email = payload.email.strip().lower()
    if db.query(AdminUser.id).filter(func.lower(AdminUser.email) == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = AdminUser(
        email=email,
        password_hash=get_password_hash(payload.password),
        name=payload.name,
        role=payload.role.value,
        active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    db.refresh(user)

    log_admin_action(db, request, current, entity_type="admin_user", entity_id=user.id, action="create",
                     description=f"Created admin user {user.email} ({user.role})", after=_public(user))
    return user


@router.patch("/{user_id}", response_model=schemas.AdminUserOut)
def update_admin_user(
    user_id: str,
    payload: schemas.AdminUserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current: AdminPrincipal = Depends(require_manager),
):
    user = _get_user(db, user_id)
    _check_owner_rights(current, user.role)
    before = _public(user)

    data = payload.model_dump(exclude_unset=True)
    if "role" in data and data["role"] is not None:
        _check_owner_rights(current, data["role"])
        user.role = data["role"].value
    if data.get("name"):
        user.name = data["name"]
    if data.get("active") is not None:
        if user.id == current.user_id and not data["active"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
        user.active = data["active"]
    if data.get("password"):
        user.password_hash = get_password_hash(data["password"])
    db.commit()
    db.refresh(user)

    log_admin_action(db, request, current, entity_type="admin_user", entity_id=user.id, action="update",
                     description=f"Updated admin user {user.email}", before=before, after=_public(user))
    return user


@router.delete("/{user_id}", response_model=OkResponse)
def delete_admin_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current: AdminPrincipal = Depends(require_manager),
):
    user = _get_user(db, user_id)
    _check_owner_rights(current, user.role)
    if user.id == current.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    before = _public(user)
    db.delete(user)
    db.commit()

    log_admin_action(db, request, current, entity_type="admin_user", entity_id=user_id, action="delete",
                     description=f"Deleted admin user {before['email']}", before=before)
    return {"ok": True}


# Issue a one-time reset token; only its bcrypt hash is stored
@router.post("/{user_id}/reset-password", response_model=schemas.ResetTokenResponse)
def issue_reset_token(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current: AdminPrincipal = Depends(require_manager),
):
    user = _get_user(db, user_id)
    _check_owner_rights(current, user.role)

    raw_token = secrets.token_urlsafe(32)
    expires_at = utcnow() + RESET_TOKEN_TTL
    user.reset_token = get_password_hash(raw_token, rounds=TOKEN_ROUNDS)
    user.reset_token_expires_at = expires_at
    db.commit()

    log_admin_action(db, request, current, entity_type="admin_user", entity_id=user.id, action="reset_token",
                     description=f"Issued password reset token for {user.email}")
    return {"ok": True, "reset_token": raw_token, "expires_at": expires_at}
