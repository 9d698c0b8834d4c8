"""
schemas/auth.py — Pydantic models for signup and login

Business Rules:
- Name must be at least 2 characters
- Email is validated by EmailStr and stored lowercase
- Password must be at least 6 characters
- confirm_password, when sent, must equal password

Called by: routers/auth.py, routers/admin.py
Depends on: pydantic, email-validator (EmailStr)
"""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, field_validator, model_validator


def normalize_email(v):
    """Trim and lower-case before EmailStr checks the address."""
    return v.strip().lower() if isinstance(v, str) else v


def check_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    return v


class SignupRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    confirm_password: str | None = None

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return check_password(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords don't match")
        return self


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_lower(cls, v: str) -> str:
        return v.strip().lower()
