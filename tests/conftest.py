"""
conftest.py — Shared Test Fixtures for GlobeTrotter

Provides an in-memory SQLite database, FastAPI TestClients with auth
overrides, and factory fixtures for users, cities and trips.

Business Rules:
- All tests run against an isolated in-memory DB
- `client` acts as a regular traveller, `admin_client` as an admin
- `anon_client` only swaps the DB, so session auth runs for real
- Each test function gets fresh tables

Called by: all test files via pytest autodiscovery
Depends on: globetrotter.models (Base), globetrotter.database (get_db),
            globetrotter.dependencies
"""

import os

os.environ["TESTING"] = "1"  # Must be set before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from globetrotter.models import Activity, Attraction, Base, City, Trip, TripStop, User
from globetrotter.services.auth_service import create_user

# ── In-memory SQLite engine ──────────────────────────────────────────

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

TEST_PASSWORD = "secret123"


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default — turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _make_user(db: Session, email: str, name: str, is_admin: bool = False) -> User:
    user = create_user(db, email=email, name=name, password=TEST_PASSWORD, is_admin=is_admin)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """A regular traveller."""
    return _make_user(db_session, "traveller@example.com", "Test Traveller")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """A second traveller, for ownership checks."""
    return _make_user(db_session, "other@example.com", "Other Traveller")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    """An admin (is_admin flag)."""
    return _make_user(db_session, "admin@example.com", "Test Admin", is_admin=True)


@pytest.fixture()
def test_city(db_session: Session) -> City:
    """Paris with two attractions."""
    city = City(name="Paris", country="France", region="Europe", cost_index=75, popularity=95)
    city.attractions = [
        Attraction(name="Eiffel Tower", type="sightseeing", cost=30, duration=180),
        Attraction(name="Louvre Museum", type="sightseeing", cost=20, duration=240),
    ]
    db_session.add(city)
    db_session.commit()
    db_session.refresh(city)
    return city


@pytest.fixture()
def second_city(db_session: Session) -> City:
    city = City(name="Rome", country="Italy", region="Europe", cost_index=68, popularity=91)
    db_session.add(city)
    db_session.commit()
    db_session.refresh(city)
    return city


@pytest.fixture()
def test_trip(db_session: Session, test_user: User, test_city: City) -> Trip:
    """A 9-day trip owned by test_user with one stop and one activity."""
    trip = Trip(
        user_id=test_user.id,
        name="Summer in Paris",
        description="Museums and cafes",
        start_date=date(2030, 6, 1),
        end_date=date(2030, 6, 10),
        status="upcoming",
    )
    stop = TripStop(
        city_id=test_city.id,
        start_date=date(2030, 6, 1),
        end_date=date(2030, 6, 4),
        order=1,
    )
    attraction = test_city.attractions[0]
    stop.activities = [
        Activity(attraction_id=attraction.id, name=attraction.name, type="sightseeing", cost=30, duration=180)
    ]
    trip.stops.append(stop)
    db_session.add(trip)
    db_session.commit()
    db_session.refresh(trip)
    return trip


def _client_with(db_session: Session, user: User | None = None, admin: bool = False):
    from globetrotter.database import get_db
    from globetrotter.dependencies import require_admin, require_user
    from globetrotter.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    if user is not None:
        app.dependency_overrides[require_user] = lambda: user
        if admin:
            app.dependency_overrides[require_admin] = lambda: user
    return app


@pytest.fixture()
def client(db_session: Session, test_user: User) -> TestClient:
    """TestClient with auth overridden to return test_user."""
    app = _client_with(db_session, test_user)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_client(db_session: Session, admin_user: User) -> TestClient:
    """TestClient with admin auth overrides."""
    app = _client_with(db_session, admin_user, admin=True)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def anon_client(db_session: Session) -> TestClient:
    """TestClient with only the DB swapped; auth runs through the session cookie."""
    app = _client_with(db_session)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def login(anon_client: TestClient):
    """Log anon_client in through the API so it carries a session cookie."""

    def _login(email: str, password: str = TEST_PASSWORD):
        return anon_client.post("/api/auth/login", json={"email": email, "password": password})

    return _login
