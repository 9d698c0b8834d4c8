"""Auth & user models — users, roles, per-user preferences."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utcnow


class Role(Base):
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(500))
    permissions = Column(JSON, default=list)
    created_at = Column(UTCDateTime, default=utcnow)

    users = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255))
    password_hash = Column(String(255), nullable=False)
    image = Column(Text)
    is_admin = Column(Boolean, default=False, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="SET NULL"))
    status = Column(String(20), default="active", nullable=False)  # active | suspended
    saved_destinations = Column(JSON, default=list)  # list of city ids
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    role = relationship("Role", back_populates="users")
    preferences = relationship(
        "UserPreferences", back_populates="user", uselist=False,
        cascade="all, delete-orphan",
    )
    trips = relationship("Trip", back_populates="user", cascade="all, delete-orphan")


class UserPreferences(Base):
    __tablename__ = "user_preferences"
    id = Column(Integer, primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    language = Column(String(10), default="en", nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    privacy = Column(String(20), default="private", nullable=False)
    timezone = Column(String(64), default="UTC", nullable=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="preferences")
