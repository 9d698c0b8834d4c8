#!/usr/bin/env python3
"""Seed demo data — an admin account, sample cities and a sample trip.

Usage (after `pip install -e .` and `alembic upgrade head`):
    python scripts/seed.py [--with-trip]

Idempotent: existing users and cities are left as they are.
"""

import argparse
import logging
from datetime import date

from sqlalchemy.orm import Session

from globetrotter.database import SessionLocal
from globetrotter.logging_config import setup_logging
from globetrotter.models import Activity, Attraction, City, Role, Trip, TripStop, User
from globetrotter.services.auth_service import create_user, find_user_by_email

log = logging.getLogger("seed")

DEMO_EMAIL = "demo@globetrotter.com"
DEMO_PASSWORD = "demo123"

# (name, country, region, description, cost_index, popularity, lat, long, attractions)
CITIES = [
    ("Paris", "France", "Europe", "The City of Light, famous for its cafe culture, Eiffel Tower, and the Louvre.",
     75, 95, 48.8566, 2.3522, [
         ("Eiffel Tower", "sightseeing", 30, 180, "Iconic iron lady of Paris."),
         ("Louvre Museum", "sightseeing", 20, 240, "World's largest art museum."),
         ("Seine Cruise", "activity", 15, 60, "Relaxing boat ride."),
         ("Montmartre Walk", "sightseeing", 0, 120, "Artist quarter with views."),
     ]),
    ("Tokyo", "Japan", "Asia", "A bustling metropolis mixing neon with traditional temples.",
     70, 90, 35.6762, 139.6503, [
         ("Senso-ji Temple", "sightseeing", 0, 60, "Ancient Buddhist temple."),
         ("Shibuya Crossing", "sightseeing", 0, 30, "Busiest intersection."),
         ("TeamLab Planets", "entertainment", 30, 90, "Digital art museum."),
     ]),
    ("New York", "USA", "North America", "The Big Apple, known for Times Square, Central Park, and Broadway.",
     85, 92, 40.7128, -74.0060, [
         ("Statue of Liberty", "sightseeing", 25, 180, "Symbol of freedom."),
         ("Central Park", "relaxation", 0, 120, "Urban park oasis."),
         ("Broadway Show", "entertainment", 100, 180, "World-class theater."),
     ]),
    ("Barcelona", "Spain", "Europe", "Mediterranean city with stunning architecture.",
     65, 88, 41.3851, 2.1734, [
         ("Sagrada Familia", "sightseeing", 26, 150, "Gaudi's masterpiece basilica."),
         ("Park Guell", "sightseeing", 10, 120, "Gardens and architectonic elements."),
         ("Barceloneta Beach", "relaxation", 0, 360, "Relax on the Mediterranean coast."),
     ]),
    ("Bali", "Indonesia", "Asia", "Tropical island with beaches, temples, and rice terraces.",
     40, 85, -8.3405, 115.0920, [
         ("Uluwatu Temple", "sightseeing", 5, 90, "Sea temple on a cliff."),
         ("Sacred Monkey Forest", "adventure", 10, 120, "Sanctuary for monkeys."),
         ("Rice Terraces", "sightseeing", 0, 60, "Scenic green tiered fields."),
     ]),
    ("Rome", "Italy", "Europe", "The Eternal City with ancient ruins and Renaissance art.",
     68, 91, 41.9028, 12.4964, [
         ("Colosseum Tour", "sightseeing", 30, 180, "Ancient Roman amphitheater."),
         ("Vatican Museums", "sightseeing", 35, 240, "Art collections and Sistine Chapel."),
         ("Trevi Fountain", "sightseeing", 0, 30, "Baroque fountain."),
     ]),
]


def seed_admin(db: Session) -> User:
    role = db.query(Role).filter(Role.name == "admin").first()
    if role is None:
        role = Role(name="admin", description="Full access to the admin console", permissions=["*"])
        db.add(role)
        db.flush()
    user = find_user_by_email(db, DEMO_EMAIL)
    if user is None:
        user = create_user(db, email=DEMO_EMAIL, name="Demo User", password=DEMO_PASSWORD,
                           role_id=role.id, is_admin=True)
        log.info(f"Created demo admin {DEMO_EMAIL}")
    else:
        user.is_admin = True
    return user


def seed_cities(db: Session) -> dict[str, City]:
    cities = {}
    for name, country, region, desc, cost_index, popularity, lat, lng, attractions in CITIES:
        city = db.query(City).filter(City.name == name, City.country == country).first()
        if city is None:
            city = City(name=name, country=country, region=region, description=desc,
                        image_url=f"/images/cities/{name.lower().replace(' ', '')}.jpg",
                        cost_index=cost_index, popularity=popularity, latitude=lat, longitude=lng)
            city.attractions = [
                Attraction(name=a_name, type=a_type, cost=cost, duration=duration, description=a_desc)
                for a_name, a_type, cost, duration, a_desc in attractions
            ]
            db.add(city)
            log.info(f"Created city {name}")
        cities[name] = city
    db.flush()
    return cities


def seed_trip(db: Session, user: User, cities: dict[str, City]) -> None:
    if db.query(Trip).filter(Trip.user_id == user.id).first():
        return
    trip = Trip(user_id=user.id, name="European Adventure 2026",
                description="A month-long journey through historic European cities",
                start_date=date(2026, 6, 1), end_date=date(2026, 6, 28), status="upcoming")
    legs = [("Paris", date(2026, 6, 1), date(2026, 6, 10)),
            ("Barcelona", date(2026, 6, 10), date(2026, 6, 19)),
            ("Rome", date(2026, 6, 19), date(2026, 6, 28))]
    for order, (name, start, end) in enumerate(legs, start=1):
        city = cities[name]
        stop = TripStop(city_id=city.id, start_date=start, end_date=end, order=order)
        first = city.attractions[0]
        stop.activities = [Activity(attraction_id=first.id, name=first.name, type=first.type,
                                    cost=first.cost, duration=first.duration, date=start)]
        trip.stops.append(stop)
    db.add(trip)
    log.info("Created sample trip")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed GlobeTrotter demo data")
    parser.add_argument("--with-trip", action="store_true", help="also create a sample trip")
    args = parser.parse_args()

    setup_logging()
    db = SessionLocal()
    try:
        user = seed_admin(db)
        cities = seed_cities(db)
        if args.with_trip:
            seed_trip(db, user, cities)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
    log.info("Seeding complete")


if __name__ == "__main__":
    main()
