"""Model -> JSON dict converters shared by services.

Dates and datetimes are emitted as ISO strings; passwords never leave here.
"""

from .models import Activity, Attraction, AuditLog, City, Expense, Role, Trip, TripStop, User, UserPreferences


def _iso(value):
    return value.isoformat() if value else None


# ── Users ────────────────────────────────────────────────────────────


def user_summary(u: User | None) -> dict | None:
    if u is None:
        return None
    return {"id": u.id, "name": u.name, "email": u.email}


def role_to_dict(r: Role, user_count: int | None = None) -> dict:
    d = {
        "id": r.id,
        "name": r.name,
        "description": r.description,
        "permissions": list(r.permissions or []),
        "created_at": _iso(r.created_at),
    }
    if user_count is not None:
        d["user_count"] = user_count
    return d


def user_to_dict(u: User, trip_count: int | None = None) -> dict:
    d = {
        "id": u.id,
        "email": u.email,
        "name": u.name,
        "image": u.image,
        "is_admin": bool(u.is_admin),
        "role_id": u.role_id,
        "role": role_to_dict(u.role) if u.role else None,
        "status": u.status,
        "created_at": _iso(u.created_at),
        "updated_at": _iso(u.updated_at),
    }
    if trip_count is not None:
        d["trip_count"] = trip_count
    return d


def preferences_to_dict(p: UserPreferences) -> dict:
    return {
        "id": p.id,
        "user_id": p.user_id,
        "language": p.language,
        "currency": p.currency,
        "privacy": p.privacy,
        "timezone": p.timezone,
    }


# ── Catalog ──────────────────────────────────────────────────────────


def city_summary(c: City | None) -> dict | None:
    if c is None:
        return None
    return {"id": c.id, "name": c.name, "country": c.country, "image_url": c.image_url}


def attraction_to_dict(a: Attraction, with_city: bool = False) -> dict:
    d = {
        "id": a.id,
        "city_id": a.city_id,
        "name": a.name,
        "description": a.description,
        "type": a.type,
        "cost": a.cost,
        "duration": a.duration,
        "rating": a.rating,
        "reviews": a.reviews,
        "image_url": a.image_url,
        "location": a.location,
        "created_at": _iso(a.created_at),
    }
    if with_city:
        d["city"] = city_summary(a.city)
    return d


def city_to_dict(c: City, with_attractions: bool = False, stop_count: int | None = None) -> dict:
    d = {
        "id": c.id,
        "name": c.name,
        "country": c.country,
        "region": c.region,
        "description": c.description,
        "image_url": c.image_url,
        "cost_index": c.cost_index,
        "popularity": c.popularity,
        "latitude": c.latitude,
        "longitude": c.longitude,
        "created_at": _iso(c.created_at),
    }
    if with_attractions:
        d["attractions"] = [attraction_to_dict(a) for a in c.attractions]
    if stop_count is not None:
        d["stop_count"] = stop_count
    return d


# ── Trips ────────────────────────────────────────────────────────────


def activity_to_dict(a: Activity) -> dict:
    return {
        "id": a.id,
        "stop_id": a.stop_id,
        "attraction_id": a.attraction_id,
        "name": a.name,
        "description": a.description,
        "type": a.type,
        "cost": a.cost,
        "duration": a.duration,
        "date": _iso(a.date),
        "time": a.time,
        "notes": a.notes,
        "is_custom": bool(a.is_custom),
    }


def stop_to_dict(s: TripStop, with_activities: bool = True) -> dict:
    d = {
        "id": s.id,
        "trip_id": s.trip_id,
        "city_id": s.city_id,
        "city": city_summary(s.city),
        "start_date": _iso(s.start_date),
        "end_date": _iso(s.end_date),
        "order": s.order,
        "notes": s.notes,
    }
    if with_activities:
        d["activities"] = [activity_to_dict(a) for a in s.activities]
    return d


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": e.id,
        "trip_id": e.trip_id,
        "category": e.category,
        "amount": e.amount,
        "currency": e.currency,
        "description": e.description,
        "date": _iso(e.date),
        "created_at": _iso(e.created_at),
    }


def trip_to_dict(
    t: Trip,
    with_stops: bool = True,
    with_expenses: bool = True,
    with_owner: bool = False,
) -> dict:
    d = {
        "id": t.id,
        "user_id": t.user_id,
        "name": t.name,
        "description": t.description,
        "cover_image": t.cover_image,
        "start_date": _iso(t.start_date),
        "end_date": _iso(t.end_date),
        "status": t.status,
        "share_id": t.share_id,
        "is_locked": bool(t.is_locked),
        "admin_notes": t.admin_notes,
        "created_at": _iso(t.created_at),
        "updated_at": _iso(t.updated_at),
    }
    if with_stops:
        d["stops"] = [stop_to_dict(s) for s in t.stops]
    if with_expenses:
        d["expenses"] = [expense_to_dict(e) for e in t.expenses]
    if with_owner:
        d["user"] = user_summary(t.user)
    return d


# ── Audit ────────────────────────────────────────────────────────────


def audit_to_dict(entry: AuditLog) -> dict:
    return {
        "id": entry.id,
        "action": entry.action,
        "entity_type": entry.entity_type,
        "entity_id": entry.entity_id,
        "admin_id": entry.admin_id,
        "admin": user_summary(entry.admin),
        "details": entry.details,
        "created_at": _iso(entry.created_at),
    }
