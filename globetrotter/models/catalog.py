"""Destination catalog — cities and their attractions."""

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utcnow


class City(Base):
    __tablename__ = "cities"
    __table_args__ = (UniqueConstraint("name", "country", name="uq_cities_name_country"),)

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    country = Column(String(255), nullable=False)
    region = Column(String(255))
    description = Column(Text)
    image_url = Column(Text)
    cost_index = Column(Integer, default=50, nullable=False)  # rough daily cost, USD
    popularity = Column(Integer, default=50, nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)
    created_at = Column(UTCDateTime, default=utcnow)

    attractions = relationship(
        "Attraction", back_populates="city", cascade="all, delete-orphan",
        order_by="Attraction.name",
    )
    stops = relationship("TripStop", back_populates="city")


class Attraction(Base):
    __tablename__ = "attractions"
    id = Column(Integer, primary_key=True)
    city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    type = Column(String(50), nullable=False)
    cost = Column(Float, default=0, nullable=False)
    duration = Column(Integer)  # minutes
    rating = Column(Float, default=0, nullable=False)
    reviews = Column(Integer, default=0, nullable=False)
    image_url = Column(Text)
    location = Column(String(500))
    created_at = Column(UTCDateTime, default=utcnow)

    city = relationship("City", back_populates="attractions")
