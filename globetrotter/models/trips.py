"""Trip planning models — trips, dated stops, activities, expenses."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utcnow


class Trip(Base):
    __tablename__ = "trips"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    cover_image = Column(Text)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(20), default="upcoming", nullable=False)  # upcoming | ongoing | past
    share_id = Column(String(64), unique=True, index=True)
    is_locked = Column(Boolean, default=False, nullable=False)
    admin_notes = Column(Text)
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="trips")
    stops = relationship(
        "TripStop", back_populates="trip", cascade="all, delete-orphan",
        order_by="TripStop.order",
    )
    expenses = relationship(
        "Expense", back_populates="trip", cascade="all, delete-orphan",
        order_by="Expense.date.desc()",
    )


class TripStop(Base):
    __tablename__ = "trip_stops"
    id = Column(Integer, primary_key=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    order = Column(Integer, nullable=False, default=1)
    notes = Column(Text)

    trip = relationship("Trip", back_populates="stops")
    city = relationship("City", back_populates="stops")
    activities = relationship(
        "Activity", back_populates="stop", cascade="all, delete-orphan",
        order_by="Activity.id",
    )


class Activity(Base):
    __tablename__ = "activities"
    id = Column(Integer, primary_key=True)
    stop_id = Column(Integer, ForeignKey("trip_stops.id", ondelete="CASCADE"), nullable=False, index=True)
    attraction_id = Column(Integer, ForeignKey("attractions.id", ondelete="SET NULL"))
    name = Column(String(255), nullable=False)
    description = Column(Text)
    type = Column(String(50), default="other", nullable=False)
    cost = Column(Float, default=0, nullable=False)
    duration = Column(Integer)  # minutes
    date = Column(Date)
    time = Column(String(10))
    notes = Column(Text)
    is_custom = Column(Boolean, default=False, nullable=False)

    stop = relationship("TripStop", back_populates="activities")
    attraction = relationship("Attraction")


class Expense(Base):
    __tablename__ = "expenses"
    id = Column(Integer, primary_key=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String(30), nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    description = Column(String(200))
    date = Column(Date, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow)

    trip = relationship("Trip", back_populates="expenses")
