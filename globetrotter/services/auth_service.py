"""
services/auth_service.py — Password hashing, signup and credential checks

Business Rules:
- Passwords are stored as bcrypt hashes only
- Emails are unique (compared lower-cased)
- Signup creates the user with an empty saved-destinations list and a
  default preferences row in the same commit
- Suspended accounts cannot log in

Called by: routers/auth.py, services/admin_service.py, scripts/seed.py
Depends on: models, passlib
"""

import logging

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..models import User, UserPreferences

log = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognized hash format
        return False


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    email: str,
    name: str,
    password: str,
    role_id: int | None = None,
    is_admin: bool = False,
) -> User:
    """Insert a user plus default preferences. Caller commits."""
    user = User(
        email=email.strip().lower(),
        name=name.strip(),
        password_hash=hash_password(password),
        role_id=role_id,
        is_admin=is_admin,
        status="active",
        saved_destinations=[],
    )
    user.preferences = UserPreferences()
    db.add(user)
    db.flush()
    return user


def signup(db: Session, name: str, email: str, password: str) -> dict:
    if find_user_by_email(db, email):
        return {"error": "User with this email already exists", "status": 400}
    user = create_user(db, email=email, name=name, password=password)
    db.commit()
    log.info(f"New signup: {user.email} (id={user.id})")
    return {"message": "User created successfully", "user_id": user.id}


def authenticate(db: Session, email: str, password: str) -> dict:
    """Check credentials. Returns {"user": User} or an error dict."""
    user = find_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        log.warning(f"Failed login for {email}")
        return {"error": "Invalid email or password", "status": 401}
    if user.status == "suspended":
        return {"error": "Account suspended", "status": 403}
    return {"user": user}
