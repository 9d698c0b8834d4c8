"""Public shared itineraries and copying them into your own account."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_user, unwrap
from ..models import User
from ..services import trip_service

router = APIRouter(tags=["share"])


@router.get("/api/share/{share_id}")
def api_view_shared_trip(share_id: str, db: Session = Depends(get_db)):
    # No session required
    return unwrap(trip_service.public_view(db, share_id))


@router.post("/api/share/{share_id}/copy")
def api_copy_shared_trip(share_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return unwrap(trip_service.copy_shared_trip(db, share_id, user))
