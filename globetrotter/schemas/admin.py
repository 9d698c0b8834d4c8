"""
schemas/admin.py — Pydantic models for the admin console

Business Rules:
- New users need email, name and a password of at least 6 characters
- User updates either carry an action (suspend, unsuspend, reset_password)
  or plain field changes
- Role names are required and non-empty
- Trip actions are validated by the service (unknown action -> 400)

Called by: routers/admin.py
Depends on: pydantic
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from .auth import check_password, normalize_email


# ── Users ────────────────────────────────────────────────────────────


class AdminUserCreate(BaseModel):
    email: EmailStr
    name: str
    password: str
    role_id: int | None = None
    is_admin: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return check_password(v)


class AdminUserUpdate(BaseModel):
    action: Literal["suspend", "unsuspend", "reset_password"] | None = None
    new_password: str | None = None
    name: str | None = None
    email: EmailStr | None = None
    role_id: int | None = None
    is_admin: bool | None = None

    @field_validator("email", mode="before")
    @classmethod
    def email_valid(cls, v: str | None) -> str | None:
        return normalize_email(v)


# ── Roles ────────────────────────────────────────────────────────────


class RoleCreate(BaseModel):
    name: str
    description: str | None = None
    permissions: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Role name is required")
        return v


class RoleUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    permissions: list[str] | None = None


# ── Trips ────────────────────────────────────────────────────────────


class AdminTripUpdate(BaseModel):
    action: str
    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    cover_image: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    status: Literal["upcoming", "ongoing", "past"] | None = None
    admin_notes: str | None = None
