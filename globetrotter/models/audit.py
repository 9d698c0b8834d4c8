"""Audit trail of administrative actions."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utcnow


class AuditLog(Base):
    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_logs_created_at", "created_at"),)

    id = Column(Integer, primary_key=True)
    action = Column(String(50), nullable=False, index=True)  # e.g. trip_locked, user_suspended
    entity_type = Column(String(30), nullable=False, index=True)  # user | trip | city | attraction | role
    entity_id = Column(String(64))
    admin_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    details = Column(Text)
    created_at = Column(UTCDateTime, default=utcnow)

    admin = relationship("User")
