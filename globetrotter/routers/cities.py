"""Cities API — browse for signed-in users, manage for admins."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_admin, require_user, unwrap
from ..models import User
from ..schemas.catalog import CityCreate, CityUpdate
from ..services import catalog_service

router = APIRouter(tags=["cities"])


@router.get("/api/cities")
def api_list_cities(
    search: str | None = None,
    region: str | None = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return catalog_service.list_cities(db, search=search, region=region)


@router.get("/api/cities/{city_id}")
def api_get_city(city_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return unwrap(catalog_service.get_city(db, city_id))


@router.post("/api/cities", status_code=201)
def api_create_city(body: CityCreate, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(catalog_service.create_city(db, body.model_dump(), user))


@router.put("/api/cities/{city_id}")
def api_update_city(
    city_id: int,
    body: CityUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return unwrap(catalog_service.update_city(db, city_id, body.model_dump(exclude_unset=True), user))


@router.delete("/api/cities/{city_id}")
def api_delete_city(city_id: int, user: User = Depends(require_admin), db: Session = Depends(get_db)):
    return unwrap(catalog_service.delete_city(db, city_id, user))
