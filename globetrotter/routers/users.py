"""User API — profile, preferences, saved destinations and dashboard."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_user, unwrap
from ..models import User
from ..schemas.users import PreferencesUpdate, ProfileUpdate, SavedDestinationToggle
from ..services import user_service

router = APIRouter(tags=["user"])


# ── Profile ──────────────────────────────────────────────────────────


@router.get("/api/user/profile")
def api_get_profile(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return user_service.get_profile(db, user)


@router.put("/api/user/profile")
def api_update_profile(body: ProfileUpdate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return unwrap(user_service.update_profile(db, user, body.model_dump(exclude_unset=True)))


@router.delete("/api/user/profile")
def api_delete_account(request: Request, user: User = Depends(require_user), db: Session = Depends(get_db)):
    result = user_service.delete_account(db, user)
    request.session.clear()
    return result


# ── Preferences ──────────────────────────────────────────────────────


@router.get("/api/user/preferences")
def api_get_preferences(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return user_service.get_preferences(db, user)


@router.put("/api/user/preferences")
def api_update_preferences(
    body: PreferencesUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return user_service.update_preferences(db, user, body.model_dump(exclude_unset=True))


# ── Saved destinations ───────────────────────────────────────────────


@router.get("/api/user/saved-destinations")
def api_saved_destinations(user: User = Depends(require_user)):
    return user_service.get_saved_destinations(user)


@router.post("/api/user/saved-destinations")
def api_toggle_saved_destination(
    body: SavedDestinationToggle,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return unwrap(user_service.toggle_saved_destination(db, user, body.city_id))


@router.get("/api/user/dashboard")
def api_dashboard(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return user_service.get_dashboard(db, user)
