"""
gating.py — Page access gate

Redirects browser page requests based on login state and path. API routes
do their own auth through dependencies and are never redirected.

Business Rules:
- Logged-in users visiting /login or /signup go to /dashboard
- /, /share/*, /login and /signup are open to everyone
- Every other page requires a login; anonymous visitors go to /login
- "Logged in" means the session cookie carries a user_id

Called by: main.py (middleware)
Depends on: starlette sessions (request.session)
"""

import re

from fastapi import Request
from fastapi.responses import RedirectResponse

# Paths the gate never looks at
EXCLUDED_PREFIXES = (
    "/api",
    "/static",
    "/_next",
    "/images",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
)
_IMAGE_FILE = re.compile(r".*\.(png|jpe?g|svg)$", re.IGNORECASE)

AUTH_PAGES = ("/login", "/signup")
LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


def is_gated(path: str) -> bool:
    """True when the gate applies to this path."""
    if path.startswith(EXCLUDED_PREFIXES):
        return False
    return not _IMAGE_FILE.match(path)


def gate_redirect(path: str, logged_in: bool) -> str | None:
    """Return the redirect target for a page request, or None to let it through."""
    is_auth_page = path.startswith(AUTH_PAGES)
    if is_auth_page and logged_in:
        return HOME_PATH
    if path == "/" or path.startswith("/share") or is_auth_page:
        return None
    if not logged_in:
        return LOGIN_PATH
    return None


async def page_gate_middleware(request: Request, call_next):
    path = request.url.path
    if is_gated(path):
        logged_in = bool(request.session.get("user_id"))
        target = gate_redirect(path, logged_in)
        if target:
            return RedirectResponse(target, status_code=307)
    return await call_next(request)
