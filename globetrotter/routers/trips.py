"""
routers/trips.py — Trip planning endpoints for the signed-in traveller

Business Rules:
- Only the owner may read or change a trip (403 otherwise, 404 if missing)
- Admins may also replace a trip's stops, even when it is locked
- Locked trips cannot be edited or deleted by their owner
- Expenses and the budget view are owner-only
- Share links are owner-only; creating one is idempotent

Called by: main.py (router mount)
Depends on: services/trip_service, dependencies, schemas/trips
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_trip_for_user, is_admin, require_user, unwrap
from ..models import User
from ..schemas.trips import ExpenseCreate, ShareRequest, StopsReplaceRequest, TripCreate, TripUpdate
from ..serializers import trip_to_dict
from ..services import trip_service

router = APIRouter(tags=["trips"])


# ── Trips ────────────────────────────────────────────────────────────


@router.get("/api/trips")
def api_list_trips(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return trip_service.list_trips(db, user)


@router.post("/api/trips", status_code=201)
def api_create_trip(body: TripCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return trip_service.create_trip(db, user, body.model_dump())


@router.get("/api/trips/{trip_id}")
def api_get_trip(trip_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return trip_to_dict(get_trip_for_user(db, user, trip_id))


@router.put("/api/trips/{trip_id}")
def api_update_trip(
    trip_id: int,
    body: TripUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    trip = get_trip_for_user(db, user, trip_id)
    return unwrap(trip_service.update_trip(db, trip, body.model_dump(exclude_unset=True)))


@router.delete("/api/trips/{trip_id}")
def api_delete_trip(trip_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    trip = get_trip_for_user(db, user, trip_id)
    return unwrap(trip_service.delete_trip(db, trip))


@router.post("/api/trips/{trip_id}/stops")
def api_replace_stops(
    trip_id: int,
    body: StopsReplaceRequest,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    trip = get_trip_for_user(db, user, trip_id, allow_admin=True)
    if trip_service.locked_for(trip, is_admin(user)):
        raise HTTPException(403, "Trip is locked and cannot be edited")
    stops = [s.model_dump() for s in body.stops]
    return unwrap(trip_service.replace_stops(db, trip, stops))


# ── Expenses & Budget ────────────────────────────────────────────────


@router.get("/api/trips/{trip_id}/expenses")
def api_list_expenses(trip_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return trip_service.list_expenses(get_trip_for_user(db, user, trip_id))


@router.post("/api/trips/{trip_id}/expenses", status_code=201)
def api_add_expense(
    trip_id: int,
    body: ExpenseCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    trip = get_trip_for_user(db, user, trip_id)
    return trip_service.add_expense(db, trip, body.model_dump())


@router.delete("/api/trips/{trip_id}/expenses/{expense_id}")
def api_delete_expense(
    trip_id: int,
    expense_id: int,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    trip = get_trip_for_user(db, user, trip_id)
    return unwrap(trip_service.delete_expense(db, trip, expense_id))


@router.get("/api/trips/{trip_id}/budget")
def api_trip_budget(trip_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return trip_service.get_budget(get_trip_for_user(db, user, trip_id))


# ── Sharing ──────────────────────────────────────────────────────────


@router.get("/api/trips/{trip_id}/share")
def api_share_status(trip_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return trip_service.share_status(get_trip_for_user(db, user, trip_id))


@router.post("/api/trips/{trip_id}/share")
def api_update_share(
    trip_id: int,
    body: ShareRequest,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    trip = get_trip_for_user(db, user, trip_id)
    if body.action == "remove":
        return trip_service.remove_share(db, trip)
    return trip_service.create_share(db, trip)


@router.delete("/api/trips/{trip_id}/share")
def api_remove_share(trip_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    trip = get_trip_for_user(db, user, trip_id)
    trip_service.remove_share(db, trip)
    return {"success": True}
