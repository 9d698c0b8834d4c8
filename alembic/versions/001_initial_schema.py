"""initial schema - users, catalog, trips, audit log

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

For NEW databases: run `alembic upgrade head` (creates all tables from models).
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables from the SQLAlchemy models.

    checkfirst=True keeps it safe on a database that already has some tables.
    """
    from globetrotter.models import Base

    Base.metadata.create_all(bind=op.get_bind(), checkfirst=True)


def downgrade() -> None:
    """Drop all tables. Destructive: dev/test only."""
    from globetrotter.models import Base

    Base.metadata.drop_all(bind=op.get_bind())
