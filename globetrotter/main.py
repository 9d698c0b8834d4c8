"""
GlobeTrotter — Travel planning API
App factory: middleware, exception handlers, router mounts.
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .config import APP_VERSION, settings
from .gating import page_gate_middleware
from .logging_config import setup_logging
from .rate_limit import limiter
from .schemas.errors import ErrorResponse

API_VERSION = "v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.is_sqlite and not settings.testing:
        # Local SQLite runs without migrations
        from .database import engine
        from .models import Base

        Base.metadata.create_all(bind=engine)
    logger.info(f"GlobeTrotter v{APP_VERSION} started")
    yield


app = FastAPI(title="GlobeTrotter", version=APP_VERSION, lifespan=lifespan)
app.state.limiter = limiter


# ── Middleware (last added runs first) ───────────────────────────────

app.add_middleware(BaseHTTPMiddleware, dispatch=page_gate_middleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    max_age=settings.session_max_age,
    https_only=settings.is_production,
    same_site="lax",
)


@app.middleware("http")
async def api_version_middleware(request: Request, call_next):
    """Serve /api/v1/... from the /api/... routes."""
    path = request.scope["path"]
    prefix = f"/api/{API_VERSION}"
    if path == prefix or path.startswith(prefix + "/"):
        request.scope["path"] = "/api" + path[len(prefix):]
    response = await call_next(request)
    response.headers["X-API-Version"] = API_VERSION
    return response


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Tag each request with a short id and set security headers."""
    request_id = str(uuid.uuid4())[:8]
    request.state.request_id = request_id
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# ── Exception handlers ───────────────────────────────────────────────


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def _error(request: Request, status_code: int, message: str, detail: list | None = None) -> JSONResponse:
    body = ErrorResponse(
        error=message, status_code=status_code, request_id=_request_id(request), detail=detail
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error(request, exc.status_code, message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    detail = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return _error(request, 400, "Validation error", detail)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit on {request.url.path}: {exc.detail}")
    return _error(request, 429, "Too many requests")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return _error(request, 500, "Internal server error")


# ── Routers ──────────────────────────────────────────────────────────

from .routers.admin import router as admin_router  # noqa: E402
from .routers.attractions import router as attractions_router  # noqa: E402
from .routers.auth import router as auth_router  # noqa: E402
from .routers.cities import router as cities_router  # noqa: E402
from .routers.share import router as share_router  # noqa: E402
from .routers.trips import router as trips_router  # noqa: E402
from .routers.uploads import router as uploads_router  # noqa: E402
from .routers.users import router as users_router  # noqa: E402

app.include_router(auth_router)
app.include_router(cities_router)
app.include_router(attractions_router)
app.include_router(trips_router)
app.include_router(share_router)
app.include_router(users_router)
app.include_router(uploads_router)
app.include_router(admin_router)


@app.get("/health")
def health():
    return {"status": "ok", "version": APP_VERSION}
