"""
routers/auth.py — Signup, login, logout and session status

Business Rules:
- Signup and login are rate limited per client address
- Login stores the user id in the signed session cookie
- Suspended accounts are refused at login (403)
- Logout always succeeds, even without a session

Called by: main.py (router mount)
Depends on: services/auth_service, dependencies, rate_limit
"""

from fastapi import APIRouter, Depends, Request
from loguru import logger
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..dependencies import get_user, is_admin, unwrap
from ..rate_limit import limiter
from ..schemas.auth import LoginRequest, SignupRequest
from ..serializers import user_to_dict
from ..services import auth_service


router = APIRouter(tags=["auth"])


@router.post("/api/auth/signup", status_code=201)
@limiter.limit(settings.rate_limit_auth)
def signup(request: Request, body: SignupRequest, db: Session = Depends(get_db)):
    return unwrap(auth_service.signup(db, body.name, body.email, body.password))


@router.post("/api/auth/login")
@limiter.limit(settings.rate_limit_auth)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)):
    result = unwrap(auth_service.authenticate(db, body.email, body.password))
    user = result["user"]
    request.session.clear()
    request.session["user_id"] = user.id
    logger.info(f"Login: {user.email}")
    return {"user": user_to_dict(user), "is_admin": is_admin(user)}


@router.post("/api/auth/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True}


@router.get("/api/auth/session")
def session_status(request: Request, db: Session = Depends(get_db)):
    user = get_user(request, db)
    if user is None or user.status == "suspended":
        return {"logged_in": False, "user": None, "is_admin": False}
    return {"logged_in": True, "user": user_to_dict(user), "is_admin": is_admin(user)}
