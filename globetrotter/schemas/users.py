"""Pydantic models for the signed-in user's profile, preferences and saved cities."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

from .auth import normalize_email


class ProfileUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    image: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def email_valid(cls, v: str | None) -> str | None:
        return normalize_email(v)


class PreferencesUpdate(BaseModel):
    language: str | None = Field(default=None, max_length=10)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    privacy: str | None = Field(default=None, max_length=20)
    timezone: str | None = Field(default=None, max_length=64)


class SavedDestinationToggle(BaseModel):
    city_id: int | None = None
