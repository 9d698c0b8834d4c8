"""Audit service — records and lists administrative actions."""

import logging

from sqlalchemy.orm import Session, joinedload

from ..models import AuditLog, User
from ..serializers import audit_to_dict

log = logging.getLogger(__name__)

AUDIT_PAGE_SIZE = 100


def record_audit(
    db: Session,
    admin: User | None,
    action: str,
    entity_type: str,
    entity_id,
    details: str | None = None,
) -> AuditLog:
    """Stage an audit row in the caller's transaction (caller commits)."""
    entry = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        admin_id=admin.id if admin else None,
        details=details,
    )
    db.add(entry)
    log.info(
        f"Audit {action} on {entity_type} {entity_id} by {admin.email if admin else 'system'}"
    )
    return entry


def list_audit_logs(
    db: Session, action: str | None = None, entity_type: str | None = None
) -> list[dict]:
    """Latest entries, newest first, optionally filtered."""
    q = db.query(AuditLog).options(joinedload(AuditLog.admin))
    if action:
        q = q.filter(AuditLog.action == action)
    if entity_type:
        q = q.filter(AuditLog.entity_type == entity_type)
    rows = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(AUDIT_PAGE_SIZE).all()
    return [audit_to_dict(r) for r in rows]
