"""User service — profile, preferences, saved destinations, dashboard."""

import logging
from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import City, Trip, User, UserPreferences
from ..serializers import city_summary, city_to_dict, preferences_to_dict, trip_to_dict

log = logging.getLogger(__name__)

DASHBOARD_CITY_COUNT = 4


def get_or_create_preferences(db: Session, user: User) -> UserPreferences:
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user.id).first()
    if prefs is None:
        prefs = UserPreferences(user_id=user.id)
        db.add(prefs)
        db.commit()
        db.refresh(prefs)
    return prefs


# ── Profile ──────────────────────────────────────────────────────────


def get_profile(db: Session, user: User) -> dict:
    saved = list(user.saved_destinations or [])
    cities = db.query(City).filter(City.id.in_(saved)).all() if saved else []
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "image": user.image,
        "saved_destinations": saved,
        "saved_cities": [city_summary(c) for c in cities],
        "preferences": preferences_to_dict(get_or_create_preferences(db, user)),
    }


def update_profile(db: Session, user: User, updates: dict) -> dict:
    email = updates.get("email")
    if email and email != user.email:
        taken = db.query(User.id).filter(func.lower(User.email) == email, User.id != user.id).first()
        if taken:
            return {"error": "Email already in use", "status": 400}
        user.email = email
    if updates.get("name") is not None:
        name = updates["name"].strip()
        if not name:
            return {"error": "Name cannot be empty", "status": 400}
        user.name = name
    if "image" in updates:
        user.image = updates["image"]
    db.commit()
    return {"id": user.id, "name": user.name, "email": user.email, "image": user.image}


def delete_account(db: Session, user: User) -> dict:
    log.info(f"User {user.email} (id={user.id}) deleted their account")
    db.delete(user)
    db.commit()
    return {"message": "Account deleted successfully"}


# ── Preferences ──────────────────────────────────────────────────────


def get_preferences(db: Session, user: User) -> dict:
    return preferences_to_dict(get_or_create_preferences(db, user))


def update_preferences(db: Session, user: User, updates: dict) -> dict:
    prefs = get_or_create_preferences(db, user)
    for field in ("language", "currency", "privacy", "timezone"):
        if updates.get(field) is not None:
            value = updates[field]
            setattr(prefs, field, value.upper() if field == "currency" else value)
    db.commit()
    return preferences_to_dict(prefs)


# ── Saved destinations ───────────────────────────────────────────────


def get_saved_destinations(user: User) -> dict:
    return {"saved_destinations": list(user.saved_destinations or [])}


def toggle_saved_destination(db: Session, user: User, city_id: int | None) -> dict:
    if not city_id:
        return {"error": "City ID is required", "status": 400}
    current = list(user.saved_destinations or [])
    if city_id in current:
        updated = [cid for cid in current if cid != city_id]
        is_saved = False
    else:
        updated = current + [city_id]
        is_saved = True
    # Reassign so the JSON column is flagged dirty
    user.saved_destinations = updated
    db.commit()
    return {"saved_destinations": updated, "is_saved": is_saved}


# ── Dashboard ────────────────────────────────────────────────────────


def get_dashboard(db: Session, user: User) -> dict:
    today = date.today()
    trips = db.query(Trip).filter(Trip.user_id == user.id).order_by(Trip.start_date).all()
    upcoming = [t for t in trips if t.start_date > today or t.status == "upcoming"]
    popular = (
        db.query(City)
        .order_by(City.popularity.desc(), City.name)
        .limit(DASHBOARD_CITY_COUNT)
        .all()
    )
    return {
        "user": {"id": user.id, "name": user.name, "email": user.email, "image": user.image},
        "trip_count": len(trips),
        "upcoming_trips": [trip_to_dict(t, with_expenses=False) for t in upcoming],
        "popular_cities": [city_to_dict(c) for c in popular],
    }
