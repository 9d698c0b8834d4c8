"""
dependencies.py — Shared FastAPI Dependencies

Reusable dependency functions for authentication, authorization, and the
trip ownership lookup. All routers import from here instead of defining
their own auth logic.

Business Rules:
- get_user returns None if not logged in (non-throwing)
- require_user raises 401 if not logged in, 403 if suspended
- is_admin is true when the user's role is "admin" or the is_admin flag is set
- require_admin raises 403 unless is_admin
- get_trip_for_user raises 404 for a missing trip, 403 for someone else's trip
  (admins may be allowed through by the caller)
- unwrap turns a service {"error", "status"} dict into an HTTPException

Called by: all routers
Depends on: models, database
"""

import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .database import get_db
from .models import Trip, User

log = logging.getLogger(__name__)


# ── Authentication ────────────────────────────────────────────────────


def get_user(request: Request, db: Session) -> User | None:
    """Return current user from session, or None if not logged in."""
    uid = request.session.get("user_id")
    if not uid:
        return None
    user = db.get(User, uid)
    if user is None:
        request.session.clear()
    return user


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency: raises 401 if no authenticated user, 403 if suspended."""
    user = get_user(request, db)
    if not user:
        raise HTTPException(401, "Unauthorized")
    if user.status == "suspended":
        request.session.clear()
        raise HTTPException(403, "Account suspended")
    return user


def is_admin(user: User | None) -> bool:
    """Admin by role name or by the legacy boolean flag."""
    if user is None:
        return False
    return bool(user.is_admin) or (user.role is not None and user.role.name == "admin")


def require_admin(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency: raises 403 if user is not an admin."""
    user = require_user(request, db)
    if not is_admin(user):
        raise HTTPException(403, "Forbidden: Admin access required")
    return user


# ── Query Helpers ─────────────────────────────────────────────────────


def get_trip_for_user(db: Session, user: User, trip_id: int, allow_admin: bool = False) -> Trip:
    """Load a trip the user may act on, or raise 404/403."""
    trip = db.get(Trip, trip_id)
    if not trip:
        raise HTTPException(404, "Trip not found")
    if trip.user_id != user.id and not (allow_admin and is_admin(user)):
        raise HTTPException(403, "Forbidden")
    return trip


def unwrap(result):
    """Raise the HTTPException a service error dict describes, else pass it through."""
    if isinstance(result, dict) and "error" in result:
        raise HTTPException(result.get("status", 400), result["error"])
    return result
