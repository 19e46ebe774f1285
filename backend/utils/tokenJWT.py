# utils/tokenJWT.py
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader, HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import AdminUser, AdminRole
from utils.time_utils import utcnow

# Subject used for tokens issued against the shared operator password
SHARED_SUBJECT = "admin"

# Authorization schemes: custom header first, bearer as a fallback
admin_token_header = APIKeyHeader(name="X-Admin-Token", auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)

WRITE_ROLES = (AdminRole.OWNER.value, AdminRole.ADMIN.value, AdminRole.STAFF.value)
MANAGER_ROLES = (AdminRole.OWNER.value, AdminRole.ADMIN.value)


# Identity carried by a verified admin token
@dataclass
class AdminPrincipal:
    subject: str
    name: str
    role: str
    user_id: Optional[str] = None


# Generate a signed, self-expiring admin token
def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    issued = utcnow()
    expire = issued + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"iat": issued, "exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


# Resolve the admin behind the X-Admin-Token header (or bearer token)
def get_current_admin(
    request: Request,
    header_token: Optional[str] = Depends(admin_token_header),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AdminPrincipal:
    token = header_token or (credentials.credentials if credentials else None)
    if not token:
        raise _credentials_exception()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _credentials_exception()

    subject = payload.get("sub")
    if not subject:
        raise _credentials_exception()

    if subject == SHARED_SUBJECT:
        principal = AdminPrincipal(subject=subject, name="Admin", role=AdminRole.OWNER.value)
    else:
        # Per-user tokens stop working once the account is removed or disabled
        user = db.query(AdminUser).filter(AdminUser.id == subject).first()
        if user is None or not user.active:
            raise _credentials_exception()
        principal = AdminPrincipal(subject=subject, name=user.name, role=user.role, user_id=user.id)

    request.state.admin = principal
    return principal


# Dependency factory for role-based access control
def role_required(*allowed_roles):
    def _checker(current_admin: AdminPrincipal = Depends(get_current_admin)) -> AdminPrincipal:
        if allowed_roles and (current_admin.role or "").upper() not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_admin
    return _checker


# Any admin except READONLY may mutate
require_writer = role_required(*WRITE_ROLES)
