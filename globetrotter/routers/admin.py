"""
routers/admin.py — Admin console API

User management, roles, trip moderation, the audit trail and analytics.
Every route requires an admin (role "admin" or the is_admin flag).

Business Rules:
- Admins cannot delete themselves
- Trip moderation accepts a fixed set of actions (400 otherwise)
- Admin stop replacement ignores the trip lock
- Audit listing returns the latest 100 entries

Called by: main.py (router mount)
Depends on: services/admin_service, services/audit_service,
            services/trip_service, dependencies
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_admin, unwrap
from ..models import Trip, User
from ..schemas.admin import AdminTripUpdate, AdminUserCreate, AdminUserUpdate, RoleCreate, RoleUpdate
from ..schemas.trips import StopsReplaceRequest
from ..services import admin_service, audit_service, trip_service

router = APIRouter(tags=["admin"])


# ── User Management ──────────────────────────────────────────────────


@router.get("/api/admin/users")
def api_list_users(user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return admin_service.list_users(db)


@router.post("/api/admin/users", status_code=201)
def api_create_user(
    body: AdminUserCreate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return unwrap(admin_service.create_user_account(db, body.model_dump(), user))


@router.get("/api/admin/users/{user_id}")
def api_get_user(user_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(admin_service.get_user(db, user_id))


@router.put("/api/admin/users/{user_id}")
def api_update_user(
    user_id: int,
    body: AdminUserUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return unwrap(admin_service.update_user(db, user_id, body.model_dump(exclude_unset=True), user))


@router.delete("/api/admin/users/{user_id}")
def api_delete_user(user_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(admin_service.delete_user(db, user_id, user))


# ── Roles ────────────────────────────────────────────────────────────


@router.get("/api/admin/roles")
def api_list_roles(user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return admin_service.list_roles(db)


@router.post("/api/admin/roles", status_code=201)
def api_create_role(body: RoleCreate, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(admin_service.create_role(db, body.model_dump(), user))


@router.get("/api/admin/roles/{role_id}")
def api_get_role(role_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(admin_service.get_role(db, role_id))


@router.put("/api/admin/roles/{role_id}")
def api_update_role(
    role_id: int,
    body: RoleUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return unwrap(admin_service.update_role(db, role_id, body.model_dump(exclude_unset=True), user))


@router.delete("/api/admin/roles/{role_id}")
def api_delete_role(role_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(admin_service.delete_role(db, role_id, user))


# ── Audit ────────────────────────────────────────────────────────────


@router.get("/api/admin/audit")
def api_audit_log(
    action: str | None = None,
    entity_type: str | None = None,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return audit_service.list_audit_logs(db, action=action, entity_type=entity_type)


# ── Trip Moderation ──────────────────────────────────────────────────


@router.get("/api/admin/trips")
def api_list_trips(
    city_id: int | None = None,
    user_id: int | None = None,
    status: str | None = None,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return admin_service.list_trips(db, city_id=city_id, user_id=user_id, status=status)


@router.get("/api/admin/trips/{trip_id}")
def api_get_trip(trip_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(admin_service.get_trip(db, trip_id))


@router.put("/api/admin/trips/{trip_id}")
def api_moderate_trip(
    trip_id: int,
    body: AdminTripUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    updates = body.model_dump(exclude_unset=True)
    action = updates.pop("action")
    return unwrap(admin_service.moderate_trip(db, trip_id, action, updates, user))


@router.delete("/api/admin/trips/{trip_id}")
def api_delete_trip(trip_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(admin_service.delete_trip(db, trip_id, user))


@router.post("/api/admin/trips/{trip_id}/stops")
def api_replace_trip_stops(
    trip_id: int,
    body: StopsReplaceRequest,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    trip = db.get(Trip, trip_id)
    if not trip:
        raise HTTPException(404, "Trip not found")
    result = unwrap(trip_service.replace_stops(db, trip, [s.model_dump() for s in body.stops]))
    audit_service.record_audit(
        db, user, "trip_stops_replaced", "trip", trip.id, f"Replaced stops on trip: {trip.name}"
    )
    db.commit()
    return result


# ── Stats ────────────────────────────────────────────────────────────


@router.get("/api/admin/stats")
def api_stats(
    days: int = Query(30, ge=1, le=3650),
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return admin_service.get_stats(db, days=days)
