# backend/routes/auth.py
import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import AdminUser, AdminRole
from schemas import user as schemas
from schemas.base import OkResponse
from utils.audit import write_log, request_ip
from utils.hashing import get_password_hash, verify_password
from utils.time_utils import utcnow, ensure_aware
from utils.tokenJWT import create_access_token, SHARED_SUBJECT

router = APIRouter(prefix="/api/admin", tags=["Auth"])
logger = logging.getLogger(__name__)


def _invalid_credentials() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")


# Authenticate an admin and issue a signed token
@router.post("/login", response_model=schemas.LoginResponse)
def login(payload: schemas.AdminLogin, request: Request, db: Session = Depends(get_db)):
    ip = request_ip(request)

    if payload.email:
        # Per-user login against the account's bcrypt hash
        email = payload.email.strip().lower()
        user = db.query(AdminUser).filter(func.lower(AdminUser.email) == email).first()
        if not user or not user.active or not verify_password(payload.password, user.password_hash):
            write_log(db, entity_type="auth", entity_id=email, action="login_failed",
                      description=f"Failed login for {email}", author=email, ip=ip)
            raise _invalid_credentials()

        user.last_login_at = utcnow()
        db.commit()
        token = create_access_token({"sub": user.id, "role": user.role, "name": user.name})
        write_log(db, entity_type="auth", entity_id=user.id, action="login",
                  description=f"{user.name} logged in", author=user.name, ip=ip)
        return {"ok": True, "token": token, "role": user.role, "name": user.name}

    # Shared operator password
    if not secrets.compare_digest(payload.password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8")):
        write_log(db, entity_type="auth", entity_id=SHARED_SUBJECT, action="login_failed",
                  description="Failed shared-password login", ip=ip)
        raise _invalid_credentials()

    role = AdminRole.OWNER.value
    token = create_access_token({"sub": SHARED_SUBJECT, "role": role, "name": "Admin"})
    write_log(db, entity_type="auth", entity_id=SHARED_SUBJECT, action="login",
              description="Admin logged in", ip=ip)
    return {"ok": True, "token": token, "role": role, "name": "Admin"}


# Redeem a one-time reset token issued by an owner or admin
@router.post("/reset-password", response_model=OkResponse)
def reset_password(payload: schemas.PasswordReset, request: Request, db: Session = Depends(get_db)):
    now = utcnow()
    candidates = db.query(AdminUser).filter(AdminUser.reset_token.isnot(None)).all()
    user = next(
        (
            u for u in candidates
            if u.reset_token_expires_at and ensure_aware(u.reset_token_expires_at) > now
            and verify_password(payload.token, u.reset_token)
        ),
        None,
    )
    if user is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired reset token")

    user.password_hash = get_password_hash(payload.new_password)
    user.reset_token = None
    user.reset_token_expires_at = None
    db.commit()
    logger.info("Password reset for admin user %s", user.id)
    write_log(db, entity_type="admin_user", entity_id=user.id, action="password_reset",
              description=f"Password reset for {user.email}", author=user.name, ip=request_ip(request))
    return {"ok": True}
