"""
schemas/catalog.py — Pydantic models for cities and attractions

Business Rules:
- City name and country are required and non-empty
- cost_index / popularity default to 50 when missing or not numeric
- Attractions require city_id, name and type
- Numeric attraction fields accept numbers or numeric strings (form input)

Called by: routers/cities.py, routers/attractions.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator


def _not_blank(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    return v


# ── Cities ───────────────────────────────────────────────────────────


class CityCreate(BaseModel):
    name: str
    country: str
    region: str | None = None
    description: str | None = None
    image_url: str | None = None
    cost_index: float | int | str | None = None
    popularity: float | int | str | None = None
    latitude: float | str | None = None
    longitude: float | str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _not_blank(v, "City name")

    @field_validator("country")
    @classmethod
    def country_not_blank(cls, v: str) -> str:
        return _not_blank(v, "Country")


class CityUpdate(BaseModel):
    name: str | None = None
    country: str | None = None
    region: str | None = None
    description: str | None = None
    image_url: str | None = None
    cost_index: float | int | str | None = None
    popularity: float | int | str | None = None
    latitude: float | str | None = None
    longitude: float | str | None = None


# ── Attractions ──────────────────────────────────────────────────────


class AttractionCreate(BaseModel):
    city_id: int
    name: str
    type: str
    description: str | None = None
    cost: float | str | None = None
    duration: float | int | str | None = None
    rating: float | str | None = None
    reviews: float | int | str | None = None
    image_url: str | None = None
    location: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _not_blank(v, "Attraction name")

    @field_validator("type")
    @classmethod
    def type_not_blank(cls, v: str) -> str:
        return _not_blank(v, "Attraction type")


class AttractionUpdate(BaseModel):
    city_id: int | None = None
    name: str | None = None
    type: str | None = None
    description: str | None = None
    cost: float | str | None = None
    duration: float | int | str | None = None
    rating: float | str | None = None
    reviews: float | int | str | None = None
    image_url: str | None = None
    location: str | None = None
