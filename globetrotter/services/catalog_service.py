"""
services/catalog_service.py — Cities and attractions

Business Rules:
- Cities list by popularity (highest first) with their attractions
- cost_index / popularity fall back to 50 when missing or not numeric
- A (name, country) pair is unique -> 409 on duplicates
- A city referenced by any trip stop cannot be deleted
- Attraction cost falls back to 0, duration to None when not numeric
- Every admin write is audited (city_* / attraction_*)

Called by: routers/cities.py, routers/attractions.py
Depends on: models, services/audit_service, serializers
"""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models import Attraction, City, TripStop, User
from ..serializers import attraction_to_dict, city_to_dict
from ..utils import int_or_default, safe_float, safe_int
from .audit_service import record_audit

log = logging.getLogger(__name__)

DEFAULT_COST_INDEX = 50
DEFAULT_POPULARITY = 50


def _stop_count(db: Session, city_id: int) -> int:
    return db.query(func.count(TripStop.id)).filter(TripStop.city_id == city_id).scalar() or 0


def _duplicate_city(db: Session, name: str, country: str, exclude_id: int | None = None) -> bool:
    q = db.query(City.id).filter(
        func.lower(City.name) == name.lower(), func.lower(City.country) == country.lower()
    )
    if exclude_id is not None:
        q = q.filter(City.id != exclude_id)
    return q.first() is not None


# ── Cities ───────────────────────────────────────────────────────────


def list_cities(db: Session, search: str | None = None, region: str | None = None) -> list[dict]:
    q = db.query(City).options(selectinload(City.attractions))
    if search:
        pattern = f"%{search.strip().lower()}%"
        q = q.filter(or_(func.lower(City.name).like(pattern), func.lower(City.country).like(pattern)))
    if region:
        q = q.filter(func.lower(City.region) == region.strip().lower())
    cities = q.order_by(City.popularity.desc(), City.name).all()
    return [city_to_dict(c, with_attractions=True) for c in cities]


def get_city(db: Session, city_id: int) -> dict:
    city = db.get(City, city_id)
    if not city:
        return {"error": "City not found", "status": 404}
    return city_to_dict(city, with_attractions=True, stop_count=_stop_count(db, city.id))


def create_city(db: Session, data: dict, admin: User) -> dict:
    if _duplicate_city(db, data["name"], data["country"]):
        return {"error": "City already exists", "status": 409}
    city = City(
        name=data["name"],
        country=data["country"],
        region=data.get("region"),
        description=data.get("description"),
        image_url=data.get("image_url"),
        cost_index=int_or_default(data.get("cost_index"), DEFAULT_COST_INDEX),
        popularity=int_or_default(data.get("popularity"), DEFAULT_POPULARITY),
        latitude=safe_float(data.get("latitude")),
        longitude=safe_float(data.get("longitude")),
    )
    db.add(city)
    db.flush()
    record_audit(db, admin, "city_created", "city", city.id, f"Created city {city.name}, {city.country}")
    db.commit()
    return city_to_dict(city, with_attractions=True)


def update_city(db: Session, city_id: int, updates: dict, admin: User) -> dict:
    city = db.get(City, city_id)
    if not city:
        return {"error": "City not found", "status": 404}

    for field in ("name", "country"):
        if field in updates:
            value = (updates[field] or "").strip()
            if not value:
                return {"error": f"{field.capitalize()} cannot be empty", "status": 400}
            updates[field] = value
    name = updates.get("name", city.name)
    country = updates.get("country", city.country)
    if _duplicate_city(db, name, country, exclude_id=city.id):
        return {"error": "City already exists", "status": 409}

    for field in ("name", "country", "region", "description", "image_url"):
        if field in updates:
            setattr(city, field, updates[field])
    if "cost_index" in updates:
        city.cost_index = int_or_default(updates["cost_index"], DEFAULT_COST_INDEX)
    if "popularity" in updates:
        city.popularity = int_or_default(updates["popularity"], DEFAULT_POPULARITY)
    if "latitude" in updates:
        city.latitude = safe_float(updates["latitude"])
    if "longitude" in updates:
        city.longitude = safe_float(updates["longitude"])

    record_audit(db, admin, "city_updated", "city", city.id, f"Updated fields: {', '.join(sorted(updates))}")
    db.commit()
    return city_to_dict(city, with_attractions=True)


def delete_city(db: Session, city_id: int, admin: User) -> dict:
    city = db.get(City, city_id)
    if not city:
        return {"error": "City not found", "status": 404}
    if _stop_count(db, city.id) > 0:
        return {"error": "Cannot delete city with existing trip stops", "status": 400}
    label = f"{city.name}, {city.country}"
    db.delete(city)
    record_audit(db, admin, "city_deleted", "city", city_id, f"Deleted city {label}")
    db.commit()
    return {"success": True}


# ── Attractions ──────────────────────────────────────────────────────


def list_attractions(
    db: Session,
    search: str | None = None,
    type_: str | None = None,
    city_id: int | None = None,
) -> list[dict]:
    q = db.query(Attraction).join(City).options(joinedload(Attraction.city))
    if search:
        pattern = f"%{search.strip().lower()}%"
        q = q.filter(or_(func.lower(Attraction.name).like(pattern), func.lower(City.name).like(pattern)))
    if type_:
        q = q.filter(func.lower(Attraction.type) == type_.strip().lower())
    if city_id is not None:
        q = q.filter(Attraction.city_id == city_id)
    return [attraction_to_dict(a, with_city=True) for a in q.order_by(Attraction.name).all()]


def get_attraction(db: Session, attraction_id: int) -> dict:
    attraction = db.get(Attraction, attraction_id)
    if not attraction:
        return {"error": "Attraction not found", "status": 404}
    return attraction_to_dict(attraction, with_city=True)


def _apply_attraction_numbers(attraction: Attraction, data: dict) -> None:
    if "cost" in data:
        attraction.cost = safe_float(data["cost"]) or 0
    if "duration" in data:
        attraction.duration = safe_int(data["duration"]) or None
    if "rating" in data:
        attraction.rating = safe_float(data["rating"]) or 0
    if "reviews" in data:
        attraction.reviews = safe_int(data["reviews"]) or 0


def create_attraction(db: Session, data: dict, admin: User) -> dict:
    city = db.get(City, data["city_id"])
    if not city:
        return {"error": "City not found", "status": 404}
    attraction = Attraction(
        name=data["name"],
        type=data["type"],
        description=data.get("description") or None,
        image_url=data.get("image_url"),
        location=data.get("location"),
    )
    _apply_attraction_numbers(
        attraction,
        {k: data.get(k) for k in ("cost", "duration", "rating", "reviews")},
    )
    city.attractions.append(attraction)
    db.flush()
    record_audit(
        db, admin, "attraction_created", "attraction", attraction.id,
        f"Created attraction {attraction.name} in {city.name}",
    )
    db.commit()
    return attraction_to_dict(attraction, with_city=True)


def update_attraction(db: Session, attraction_id: int, updates: dict, admin: User) -> dict:
    attraction = db.get(Attraction, attraction_id)
    if not attraction:
        return {"error": "Attraction not found", "status": 404}
    new_city = None
    if updates.get("city_id") is not None and updates["city_id"] != attraction.city_id:
        new_city = db.get(City, updates["city_id"])
        if not new_city:
            return {"error": "City not found", "status": 404}
    for field in ("name", "type"):
        if field in updates and not (updates[field] or "").strip():
            return {"error": f"Attraction {field} cannot be empty", "status": 400}

    if new_city is not None:
        new_city.attractions.append(attraction)
    for field in ("name", "type", "description", "image_url", "location"):
        if field in updates and updates[field] is not None:
            value = updates[field]
            setattr(attraction, field, value.strip() if isinstance(value, str) else value)
    _apply_attraction_numbers(attraction, updates)

    record_audit(
        db, admin, "attraction_updated", "attraction", attraction.id,
        f"Updated fields: {', '.join(sorted(updates))}",
    )
    db.commit()
    return attraction_to_dict(attraction, with_city=True)


def delete_attraction(db: Session, attraction_id: int, admin: User) -> dict:
    attraction = db.get(Attraction, attraction_id)
    if not attraction:
        return {"error": "Attraction not found", "status": 404}
    name = attraction.name
    attraction.city.attractions.remove(attraction)
    record_audit(db, admin, "attraction_deleted", "attraction", attraction_id, f"Deleted attraction {name}")
    db.commit()
    return {"success": True}
