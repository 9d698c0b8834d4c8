"""Database models — re-exports all models.

Import from here:  from globetrotter.models import User, Trip, ...
Or from submodules: from globetrotter.models.auth import User
"""

from .base import Base  # noqa: F401

# Auth & Users
from .auth import Role, User, UserPreferences  # noqa: F401

# Destination catalog
from .catalog import Attraction, City  # noqa: F401

# Trip planning
from .trips import Activity, Expense, Trip, TripStop  # noqa: F401

# Admin audit trail
from .audit import AuditLog  # noqa: F401
