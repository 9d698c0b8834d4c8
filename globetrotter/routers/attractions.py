"""Attractions API — searchable catalog; admins create, edit and delete."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_admin, require_user, unwrap
from ..models import User
from ..schemas.catalog import AttractionCreate, AttractionUpdate
from ..services import catalog_service

router = APIRouter(tags=["attractions"])


@router.get("/api/attractions")
def api_list_attractions(
    search: str | None = None,
    type: str | None = None,
    city_id: int | None = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return catalog_service.list_attractions(db, search=search, type_=type, city_id=city_id)


@router.get("/api/attractions/{attraction_id}")
def api_get_attraction(attraction_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return unwrap(catalog_service.get_attraction(db, attraction_id))


@router.post("/api/attractions", status_code=201)
def api_create_attraction(
    body: AttractionCreate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return unwrap(catalog_service.create_attraction(db, body.model_dump(), user))


@router.put("/api/attractions/{attraction_id}")
def api_update_attraction(
    attraction_id: int,
    body: AttractionUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    updates = body.model_dump(exclude_unset=True)
    return unwrap(catalog_service.update_attraction(db, attraction_id, updates, user))


@router.delete("/api/attractions/{attraction_id}")
def api_delete_attraction(attraction_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(catalog_service.delete_attraction(db, attraction_id, user))
