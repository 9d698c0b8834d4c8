"""
services/admin_service.py — Admin console: users, roles, trip moderation, stats

Business Rules:
- User updates are either an action (suspend, unsuspend, reset_password)
  or a plain field update; suspensions, resets and admin-flag changes
  are audited
- An admin cannot delete their own account
- Role names are unique; a role with assigned users cannot be deleted
- Trip actions: edit, lock, unlock, duplicate, flag, unflag; anything else
  is rejected. Every action is audited
- Duplicates are "[Template] <name>", status upcoming, owned by the same
  user, with stops and activities but no expenses
- Flagging prefixes the description with "[FLAGGED] "
- Completion rate = past trips / all trips x 100; average budget = all
  expenses / all trips

Called by: routers/admin.py
Depends on: models, services/audit_service, services/trip_service,
            services/auth_service, serializers, charts
"""

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..charts import bar_chart
from ..models import City, Expense, Role, Trip, TripStop, User
from ..serializers import role_to_dict, trip_to_dict, user_to_dict
from .audit_service import record_audit
from .auth_service import create_user, find_user_by_email, hash_password
from .trip_service import apply_trip_fields, clone_itinerary

log = logging.getLogger(__name__)

FLAG_PREFIX = "[FLAGGED] "
TEMPLATE_PREFIX = "[Template] "
TRIP_ACTIONS = ("edit", "lock", "unlock", "duplicate", "flag", "unflag")
TOP_CITY_COUNT = 10


# ── User Management ──────────────────────────────────────────────────


def _trip_counts(db: Session) -> dict[int, int]:
    rows = db.query(Trip.user_id, func.count(Trip.id)).group_by(Trip.user_id).all()
    return {uid: n for uid, n in rows}


def list_users(db: Session) -> list[dict]:
    """All users, newest first, with role and trip count."""
    counts = _trip_counts(db)
    users = db.query(User).options(joinedload(User.role)).order_by(User.created_at.desc(), User.id.desc()).all()
    return [user_to_dict(u, trip_count=counts.get(u.id, 0)) for u in users]


def get_user(db: Session, user_id: int) -> dict:
    target = db.get(User, user_id)
    if not target:
        return {"error": "User not found", "status": 404}
    count = db.query(func.count(Trip.id)).filter(Trip.user_id == target.id).scalar() or 0
    return user_to_dict(target, trip_count=count)


def create_user_account(db: Session, data: dict, admin: User) -> dict:
    if find_user_by_email(db, data["email"]):
        return {"error": "User with this email already exists", "status": 400}
    if data.get("role_id") is not None and not db.get(Role, data["role_id"]):
        return {"error": "Role not found", "status": 404}
    target = create_user(
        db,
        email=data["email"],
        name=data["name"],
        password=data["password"],
        role_id=data.get("role_id"),
        is_admin=bool(data.get("is_admin")),
    )
    record_audit(db, admin, "user_created", "user", target.id, f"Created user: {target.email}")
    db.commit()
    log.info(f"Admin {admin.email} created user {target.email}")
    return user_to_dict(target, trip_count=0)


def update_user(db: Session, user_id: int, updates: dict, admin: User) -> dict:
    """Apply an action or a standard field update to a user."""
    target = db.get(User, user_id)
    if not target:
        return {"error": "User not found", "status": 404}

    action = updates.get("action")
    if action in ("suspend", "unsuspend"):
        if target.id == admin.id and action == "suspend":
            return {"error": "Cannot suspend yourself", "status": 400}
        target.status = "suspended" if action == "suspend" else "active"
        verb = "Suspended" if action == "suspend" else "Unsuspended"
        record_audit(db, admin, f"user_{action}ed", "user", target.id, f"{verb} user: {target.email}")
        db.commit()
        return user_to_dict(target)

    if action == "reset_password":
        new_password = updates.get("new_password") or ""
        if len(new_password) < 6:
            return {"error": "New password must be at least 6 characters", "status": 400}
        target.password_hash = hash_password(new_password)
        record_audit(
            db, admin, "user_password_reset", "user", target.id,
            f"Reset password for user: {target.email}",
        )
        db.commit()
        return user_to_dict(target)

    name = updates.get("name")
    if name is not None and not name.strip():
        return {"error": "Name cannot be empty", "status": 400}
    if updates.get("email") and updates["email"] != target.email:
        taken = find_user_by_email(db, updates["email"])
        if taken and taken.id != target.id:
            return {"error": "Email already in use", "status": 400}
        target.email = updates["email"]
    if name is not None:
        target.name = name.strip()
    if "role_id" in updates:
        if updates["role_id"] is not None and not db.get(Role, updates["role_id"]):
            return {"error": "Role not found", "status": 404}
        target.role_id = updates["role_id"]
    if updates.get("is_admin") is not None and bool(updates["is_admin"]) != bool(target.is_admin):
        if target.id == admin.id and not updates["is_admin"]:
            return {"error": "Cannot remove your own admin access", "status": 400}
        target.is_admin = bool(updates["is_admin"])
        record_audit(
            db, admin,
            "user_promoted_to_admin" if target.is_admin else "user_demoted_from_admin",
            "user", target.id, f"Changed admin status for user: {target.email}",
        )
    db.commit()
    db.refresh(target)
    return user_to_dict(target)


def delete_user(db: Session, user_id: int, admin: User) -> dict:
    target = db.get(User, user_id)
    if not target:
        return {"error": "User not found", "status": 404}
    if target.id == admin.id:
        return {"error": "Cannot delete yourself", "status": 400}
    email = target.email
    db.delete(target)
    record_audit(db, admin, "user_deleted", "user", user_id, f"Deleted user: {email}")
    db.commit()
    return {"success": True}


# ── Roles ────────────────────────────────────────────────────────────


def _role_user_count(db: Session, role_id: int) -> int:
    return db.query(func.count(User.id)).filter(User.role_id == role_id).scalar() or 0


def list_roles(db: Session) -> list[dict]:
    counts = dict(db.query(User.role_id, func.count(User.id)).group_by(User.role_id).all())
    return [role_to_dict(r, user_count=counts.get(r.id, 0)) for r in db.query(Role).order_by(Role.name).all()]


def get_role(db: Session, role_id: int) -> dict:
    role = db.get(Role, role_id)
    if not role:
        return {"error": "Role not found", "status": 404}
    members = db.query(User).filter(User.role_id == role.id).order_by(User.name).all()
    d = role_to_dict(role, user_count=len(members))
    d["users"] = [{"id": u.id, "name": u.name, "email": u.email} for u in members]
    return d


def _role_name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    q = db.query(Role.id).filter(func.lower(Role.name) == name.lower())
    if exclude_id is not None:
        q = q.filter(Role.id != exclude_id)
    return q.first() is not None


def create_role(db: Session, data: dict, admin: User) -> dict:
    if _role_name_taken(db, data["name"]):
        return {"error": "Role already exists", "status": 400}
    role = Role(name=data["name"], description=data.get("description"), permissions=data.get("permissions") or [])
    db.add(role)
    db.flush()
    record_audit(db, admin, "role_created", "role", role.id, f"Created role: {role.name}")
    db.commit()
    return role_to_dict(role, user_count=0)


def update_role(db: Session, role_id: int, updates: dict, admin: User) -> dict:
    role = db.get(Role, role_id)
    if not role:
        return {"error": "Role not found", "status": 404}
    if updates.get("name") is not None:
        name = updates["name"].strip()
        if not name:
            return {"error": "Role name is required", "status": 400}
        if _role_name_taken(db, name, exclude_id=role.id):
            return {"error": "Role already exists", "status": 400}
        role.name = name
    if "description" in updates:
        role.description = updates["description"]
    if updates.get("permissions") is not None:
        role.permissions = list(updates["permissions"])
    record_audit(db, admin, "role_updated", "role", role.id, f"Updated role: {role.name}")
    db.commit()
    return role_to_dict(role, user_count=_role_user_count(db, role.id))


def delete_role(db: Session, role_id: int, admin: User) -> dict:
    role = db.get(Role, role_id)
    if not role:
        return {"error": "Role not found", "status": 404}
    if _role_user_count(db, role.id) > 0:
        return {"error": "Cannot delete role with assigned users", "status": 400}
    name = role.name
    db.delete(role)
    record_audit(db, admin, "role_deleted", "role", role_id, f"Deleted role: {name}")
    db.commit()
    return {"success": True}


# ── Trip Moderation ──────────────────────────────────────────────────


def list_trips(
    db: Session,
    city_id: int | None = None,
    user_id: int | None = None,
    status: str | None = None,
) -> list[dict]:
    q = db.query(Trip).options(joinedload(Trip.user))
    if city_id is not None:
        q = q.filter(Trip.stops.any(TripStop.city_id == city_id))
    if user_id is not None:
        q = q.filter(Trip.user_id == user_id)
    if status:
        q = q.filter(Trip.status == status)
    trips = q.order_by(Trip.created_at.desc(), Trip.id.desc()).all()
    return [trip_to_dict(t, with_expenses=False, with_owner=True) for t in trips]


def get_trip(db: Session, trip_id: int) -> dict:
    trip = db.get(Trip, trip_id)
    if not trip:
        return {"error": "Trip not found", "status": 404}
    return trip_to_dict(trip, with_owner=True)


def _duplicate_trip(db: Session, trip: Trip) -> Trip:
    copy = Trip(
        user_id=trip.user_id,
        name=f"{TEMPLATE_PREFIX}{trip.name}"[:100],
        description=trip.description,
        cover_image=trip.cover_image,
        start_date=trip.start_date,
        end_date=trip.end_date,
        status="upcoming",
        admin_notes=f"Duplicated from trip {trip.id}",
    )
    clone_itinerary(trip, copy, include_expenses=False)
    db.add(copy)
    db.flush()
    return copy


def moderate_trip(db: Session, trip_id: int, action: str, updates: dict, admin: User) -> dict:
    """Run one admin action against a trip."""
    if action not in TRIP_ACTIONS:
        return {"error": "Invalid action", "status": 400}
    trip = db.get(Trip, trip_id)
    if not trip:
        return {"error": "Trip not found", "status": 404}

    if action == "edit":
        err = apply_trip_fields(trip, updates)
        if err:
            return err
        record_audit(db, admin, "trip_edited", "trip", trip.id, f"Edited trip: {trip.name}")
    elif action in ("lock", "unlock"):
        trip.is_locked = action == "lock"
        verb = "Locked" if action == "lock" else "Unlocked"
        record_audit(db, admin, f"trip_{action}ed", "trip", trip.id, f"{verb} trip: {trip.name}")
    elif action == "duplicate":
        copy = _duplicate_trip(db, trip)
        record_audit(db, admin, "trip_duplicated", "trip", copy.id, f"Duplicated trip {trip.name} as template")
        db.commit()
        log.info(f"Admin {admin.email} duplicated trip {trip.id} as {copy.id}")
        return trip_to_dict(copy, with_owner=True)
    elif action == "flag":
        description = trip.description or ""
        if not description.startswith(FLAG_PREFIX):
            trip.description = f"{FLAG_PREFIX}{description}"
        record_audit(db, admin, "trip_flagged", "trip", trip.id, f"Flagged trip: {trip.name}")
    else:
        if trip.description:
            trip.description = trip.description.replace(FLAG_PREFIX, "", 1)
        record_audit(db, admin, "trip_unflagged", "trip", trip.id, f"Unflagged trip: {trip.name}")

    db.commit()
    log.info(f"Admin {admin.email} ran '{action}' on trip {trip.id}")
    return trip_to_dict(trip, with_owner=True)


def delete_trip(db: Session, trip_id: int, admin: User) -> dict:
    trip = db.get(Trip, trip_id)
    if not trip:
        return {"error": "Trip not found", "status": 404}
    name = trip.name
    db.delete(trip)
    record_audit(db, admin, "trip_deleted", "trip", trip_id, f"Deleted trip: {name}")
    db.commit()
    return {"success": True}


# ── Stats ────────────────────────────────────────────────────────────


def get_stats(db: Session, days: int = 30) -> dict:
    """Dashboard analytics for the admin overview."""
    total_users = db.query(func.count(User.id)).scalar() or 0
    total_trips = db.query(func.count(Trip.id)).scalar() or 0
    trips_by_status = dict(db.query(Trip.status, func.count(Trip.id)).group_by(Trip.status).all())
    total_expenses = db.query(func.coalesce(func.sum(Expense.amount), 0)).scalar() or 0

    completed = trips_by_status.get("past", 0)
    completion_rate = (completed / total_trips) * 100 if total_trips else 0
    avg_budget = total_expenses / total_trips if total_trips else 0

    stop_counts = (
        db.query(City, func.count(TripStop.id).label("stop_count"))
        .join(TripStop, TripStop.city_id == City.id)
        .group_by(City.id)
        .order_by(func.count(TripStop.id).desc(), City.name)
        .limit(TOP_CITY_COUNT)
        .all()
    )
    top_cities = [
        {
            "id": c.id,
            "name": c.name,
            "country": c.country,
            "stop_count": n,
            "popularity": c.popularity,
        }
        for c, n in stop_counts
    ]

    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    months: Counter = Counter()
    for (created_at,) in db.query(Trip.created_at).all():
        if created_at and created_at >= cutoff:
            months[(created_at.year, created_at.month)] += 1
    trips_by_month = [
        {"label": datetime(year, month, 1).strftime("%b %y"), "value": n}
        for (year, month), n in sorted(months.items())
    ]

    city_chart = [{"label": c["name"], "value": c["stop_count"]} for c in top_cities]
    status_chart = [{"label": s.capitalize(), "value": n} for s, n in trips_by_status.items()]

    return {
        "days": days,
        "total_users": total_users,
        "total_trips": total_trips,
        "active_cities": len(top_cities),
        "avg_trips_per_user": total_trips / total_users if total_users else 0,
        "avg_budget": avg_budget,
        "completion_rate": completion_rate,
        "trips_by_status": trips_by_status,
        "top_cities": top_cities,
        "trips_by_month": trips_by_month,
        "city_chart": bar_chart(city_chart),
        "trips_chart": bar_chart(trips_by_month),
        "status_chart": bar_chart(status_chart),
    }
