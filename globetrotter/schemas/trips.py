"""
schemas/trips.py — Pydantic models for trips, stops, activities, expenses, sharing

Business Rules:
- Trip name 1..100 chars, description up to 500 chars
- Trip end date must be after start date
- A stop may not end before it starts
- Activity attraction_id "custom" (or missing) marks a custom activity
- Expense category is one of the fixed categories; amount >= 0;
  description required; currency is a 3-letter code (default USD)

Called by: routers/trips.py, routers/admin.py
Depends on: pydantic
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

TripStatus = Literal["upcoming", "ongoing", "past"]
ExpenseCategory = Literal["transport", "accommodation", "activities", "meals", "shopping", "other"]


# ── Trips ────────────────────────────────────────────────────────────


class TripCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    cover_image: str | None = None
    start_date: dt.date
    end_date: dt.date
    status: TripStatus = "upcoming"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Trip name is required")
        return v

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class TripUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    cover_image: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    status: TripStatus | None = None


# ── Stops & Activities ───────────────────────────────────────────────


class ActivityIn(BaseModel):
    attraction_id: int | str | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    type: str | None = None
    cost: float | str | None = None
    duration: float | int | str | None = None
    date: dt.date | None = None
    time: str | None = None
    notes: str | None = None


class StopIn(BaseModel):
    city_id: int
    start_date: dt.date
    end_date: dt.date
    order: int | None = None
    notes: str | None = None
    activities: list[ActivityIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.end_date < self.start_date:
            raise ValueError("Stop end date must not be before start date")
        return self


class StopsReplaceRequest(BaseModel):
    stops: list[StopIn]


# ── Expenses ─────────────────────────────────────────────────────────


class ExpenseCreate(BaseModel):
    description: str = Field(min_length=1, max_length=200)
    amount: float = Field(ge=0)
    category: ExpenseCategory
    date: dt.date
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        return v.upper()


# ── Sharing ──────────────────────────────────────────────────────────


class ShareRequest(BaseModel):
    action: Literal["create", "remove"] = "create"
