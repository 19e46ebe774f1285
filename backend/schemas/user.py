# backend/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from models.users import AdminRole
from schemas.base import ORMBase


# Shared-password login sends only a password; per-user login adds the e-mail
class AdminLogin(ORMBase):
    email: Optional[EmailStr] = None
    password: str = Field(min_length=1)


class LoginResponse(ORMBase):
    ok: bool = True
    token: str
    role: str
    name: str


class AdminUserCreate(ORMBase):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
    role: AdminRole = AdminRole.STAFF


class AdminUserUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[AdminRole] = None
    active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8)


# Never exposes the password or reset hashes
class AdminUserOut(ORMBase):
    id: str
    email: str
    name: str
    role: str
    active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime


class ResetTokenResponse(ORMBase):
    ok: bool = True
    reset_token: str
    expires_at: datetime


class PasswordReset(ORMBase):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=8)
