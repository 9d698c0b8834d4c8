"""
services/trip_service.py — Trips, stops, expenses, budgets and sharing

Business Rules:
- Trip end date must be after its start date
- A locked trip can only be changed by an admin
- Saving stops replaces every stop (and its activities) in one commit
- Activity attraction_id "custom" or missing -> custom activity
  (attraction_id None, is_custom True); bad cost -> 0, bad duration -> None
- City cost of a stop = nights at the stop x city cost_index
- Trip duration in days = |end - start|
- A share link is a random token; creating one twice returns the same token
- Public shared views never include expenses or owner details
- Copying a shared trip produces "<name> (Copy)" for the caller with stops,
  activities and expenses, but no share link, admin notes or lock

Called by: routers/trips.py, routers/share.py, services/admin_service.py
Depends on: models, serializers, charts
"""

import logging
import secrets
from collections import defaultdict
from datetime import date

from sqlalchemy.orm import Session, selectinload

from ..charts import bar_chart
from ..models import Activity, Attraction, City, Expense, Trip, TripStop, User
from ..serializers import expense_to_dict, stop_to_dict, trip_to_dict
from ..utils import safe_float, safe_int

log = logging.getLogger(__name__)

EXPENSE_CATEGORIES = ("transport", "accommodation", "activities", "meals", "shopping", "other")


def trip_duration_days(start: date | None, end: date | None) -> int:
    if not start or not end:
        return 0
    return abs((end - start).days)


def _trip_query(db: Session):
    return db.query(Trip).options(
        selectinload(Trip.stops).selectinload(TripStop.city),
        selectinload(Trip.stops).selectinload(TripStop.activities),
        selectinload(Trip.expenses),
    )


def locked_for(trip: Trip, user_is_admin: bool) -> bool:
    return bool(trip.is_locked) and not user_is_admin


# ── Trips ────────────────────────────────────────────────────────────


def list_trips(db: Session, user: User) -> list[dict]:
    trips = (
        _trip_query(db)
        .filter(Trip.user_id == user.id)
        .order_by(Trip.start_date.desc(), Trip.id.desc())
        .all()
    )
    return [trip_to_dict(t) for t in trips]


def create_trip(db: Session, user: User, data: dict) -> dict:
    trip = Trip(
        user_id=user.id,
        name=data["name"],
        description=data.get("description"),
        cover_image=data.get("cover_image"),
        start_date=data["start_date"],
        end_date=data["end_date"],
        status=data.get("status") or "upcoming",
    )
    db.add(trip)
    db.commit()
    log.info(f"User {user.email} created trip {trip.id} '{trip.name}'")
    return trip_to_dict(trip)


def apply_trip_fields(trip: Trip, updates: dict) -> dict | None:
    """Copy editable fields onto the trip. Returns an error dict on bad dates."""
    start = updates.get("start_date") or trip.start_date
    end = updates.get("end_date") or trip.end_date
    if end <= start:
        return {"error": "End date must be after start date", "status": 400}
    if "name" in updates and not (updates["name"] or "").strip():
        return {"error": "Trip name is required", "status": 400}

    for field in ("name", "description", "cover_image", "start_date", "end_date", "status", "admin_notes"):
        if field not in updates:
            continue
        value = updates[field]
        if value is None and field in ("name", "start_date", "end_date", "status"):
            continue
        setattr(trip, field, value.strip() if field == "name" else value)
    return None


def update_trip(db: Session, trip: Trip, updates: dict) -> dict:
    if trip.is_locked:
        return {"error": "Trip is locked and cannot be edited", "status": 403}
    updates.pop("admin_notes", None)
    err = apply_trip_fields(trip, updates)
    if err:
        return err
    db.commit()
    return trip_to_dict(trip)


def delete_trip(db: Session, trip: Trip) -> dict:
    if trip.is_locked:
        return {"error": "Trip is locked and cannot be deleted", "status": 403}
    db.delete(trip)
    db.commit()
    return {"success": True}


# ── Stops ────────────────────────────────────────────────────────────


def _build_activity(raw: dict, known_attractions: set[int]) -> Activity:
    attraction_id = raw.get("attraction_id")
    is_custom = attraction_id is None or attraction_id == "custom"
    if not is_custom:
        attraction_id = safe_int(attraction_id)
        if attraction_id not in known_attractions:
            attraction_id = None
    return Activity(
        attraction_id=None if is_custom else attraction_id,
        name=raw["name"],
        description=raw.get("description"),
        type=raw.get("type") or "other",
        cost=safe_float(raw.get("cost")) or 0,
        duration=safe_int(raw.get("duration")) or None,
        date=raw.get("date"),
        time=raw.get("time"),
        notes=raw.get("notes"),
        is_custom=is_custom,
    )


def replace_stops(db: Session, trip: Trip, stops: list[dict]) -> dict:
    """Delete all stops of the trip and recreate them from the payload."""
    city_ids = {s["city_id"] for s in stops}
    if city_ids:
        found = {cid for (cid,) in db.query(City.id).filter(City.id.in_(city_ids)).all()}
        missing = sorted(city_ids - found)
        if missing:
            return {"error": f"City not found: {missing[0]}", "status": 404}

    wanted = {
        safe_int(a.get("attraction_id"))
        for s in stops
        for a in s.get("activities") or []
    } - {None}
    known = set()
    if wanted:
        known = {aid for (aid,) in db.query(Attraction.id).filter(Attraction.id.in_(wanted)).all()}

    trip.stops.clear()
    db.flush()
    for index, raw in enumerate(stops, start=1):
        stop = TripStop(
            city_id=raw["city_id"],
            start_date=raw["start_date"],
            end_date=raw["end_date"],
            order=raw["order"] if raw.get("order") is not None else index,
            notes=raw.get("notes") or None,
        )
        stop.activities = [_build_activity(a, known) for a in raw.get("activities") or []]
        trip.stops.append(stop)
    db.commit()
    db.refresh(trip)
    log.info(f"Trip {trip.id}: replaced stops ({len(stops)} saved)")
    return {"stops": [stop_to_dict(s) for s in trip.stops]}


def clone_itinerary(source: Trip, target: Trip, include_expenses: bool) -> None:
    """Copy stops (with activities) and optionally expenses onto target."""
    for stop in source.stops:
        new_stop = TripStop(
            city_id=stop.city_id,
            start_date=stop.start_date,
            end_date=stop.end_date,
            order=stop.order,
            notes=stop.notes,
        )
        new_stop.activities = [
            Activity(
                attraction_id=a.attraction_id,
                name=a.name,
                description=a.description,
                type=a.type,
                cost=a.cost,
                duration=a.duration,
                date=a.date,
                time=a.time,
                notes=a.notes,
                is_custom=a.is_custom,
            )
            for a in stop.activities
        ]
        target.stops.append(new_stop)
    if include_expenses:
        for e in source.expenses:
            target.expenses.append(
                Expense(
                    category=e.category,
                    amount=e.amount,
                    currency=e.currency,
                    description=e.description,
                    date=e.date,
                )
            )


# ── Expenses & Budget ────────────────────────────────────────────────


def list_expenses(trip: Trip) -> list[dict]:
    return [expense_to_dict(e) for e in trip.expenses]


def add_expense(db: Session, trip: Trip, data: dict) -> dict:
    expense = Expense(
        category=data["category"],
        amount=data["amount"],
        currency=data.get("currency") or "USD",
        description=data["description"].strip(),
        date=data["date"],
    )
    trip.expenses.append(expense)
    db.commit()
    return expense_to_dict(expense)


def delete_expense(db: Session, trip: Trip, expense_id: int) -> dict:
    expense = db.get(Expense, expense_id)
    if not expense or expense.trip_id != trip.id:
        return {"error": "Expense not found", "status": 404}
    trip.expenses.remove(expense)
    db.commit()
    return {"success": True}


def get_budget(trip: Trip) -> dict:
    by_category: dict[str, float] = defaultdict(float)
    for e in trip.expenses:
        by_category[e.category] += e.amount or 0
    expenses_total = sum(by_category.values())

    activities_total = 0.0
    city_total = 0.0
    for stop in trip.stops:
        activities_total += sum(a.cost or 0 for a in stop.activities)
        nights = trip_duration_days(stop.start_date, stop.end_date)
        city_total += nights * (stop.city.cost_index if stop.city else 0)

    duration = trip_duration_days(trip.start_date, trip.end_date)
    total = expenses_total + activities_total + city_total
    chart_data = [
        {"label": category.capitalize(), "value": value}
        for category, value in by_category.items()
    ]
    return {
        "trip_id": trip.id,
        "expenses_total": expenses_total,
        "activities_total": activities_total,
        "city_costs_total": city_total,
        "total": total,
        "by_category": dict(by_category),
        "duration_days": duration,
        "average_per_day": expenses_total / duration if duration else 0,
        "chart": bar_chart(chart_data),
    }


# ── Sharing ──────────────────────────────────────────────────────────


def share_status(trip: Trip) -> dict:
    return {"share_id": trip.share_id, "is_shared": bool(trip.share_id)}


def create_share(db: Session, trip: Trip) -> dict:
    if trip.share_id:
        return share_status(trip)
    trip.share_id = secrets.token_hex(12)
    db.commit()
    log.info(f"Trip {trip.id} shared")
    return share_status(trip)


def remove_share(db: Session, trip: Trip) -> dict:
    trip.share_id = None
    db.commit()
    return {"share_id": None, "is_shared": False, "message": "Share link removed"}


def _shared_trip(db: Session, share_id: str) -> Trip | None:
    if not share_id:
        return None
    return _trip_query(db).filter(Trip.share_id == share_id).first()


def public_view(db: Session, share_id: str) -> dict:
    trip = _shared_trip(db, share_id)
    if not trip:
        return {"error": "Trip not found", "status": 404}
    return {
        "id": trip.id,
        "name": trip.name,
        "description": trip.description,
        "cover_image": trip.cover_image,
        "start_date": trip.start_date.isoformat(),
        "end_date": trip.end_date.isoformat(),
        "status": trip.status,
        "duration_days": trip_duration_days(trip.start_date, trip.end_date),
        "stops": [stop_to_dict(s) for s in trip.stops],
    }


def copy_shared_trip(db: Session, share_id: str, user: User) -> dict:
    source = _shared_trip(db, share_id)
    if not source:
        return {"error": "Trip not found", "status": 404}
    if source.user_id == user.id:
        return {"error": "Cannot copy your own trip", "status": 400}
    copy = Trip(
        user_id=user.id,
        name=f"{source.name} (Copy)"[:100],
        description=source.description,
        cover_image=source.cover_image,
        start_date=source.start_date,
        end_date=source.end_date,
        status=source.status,
    )
    clone_itinerary(source, copy, include_expenses=True)
    db.add(copy)
    db.commit()
    log.info(f"User {user.email} copied shared trip {source.id} as {copy.id}")
    return {"success": True, "trip_id": copy.id, "message": "Trip copied successfully"}
