"""
Activities module.

Usage:
    from runlog.features.activities import Activity, ActivityRepository

Components:
- Activity: Stored run (manual or Strava-sourced)
- ActivityRepository: Public list, manual CRUD, Strava upsert
"""

from .models import Activity, ActivitySource
from .repository import ActivityRepository, PUBLIC_LIST_LIMIT
from .schemas import (
    ManualActivityCreate,
    ManualActivityUpdate,
    ActivityResponse,
    manual_columns,
)

__all__ = [
    "Activity",
    "ActivitySource",
    "ActivityRepository",
    "PUBLIC_LIST_LIMIT",
    "ManualActivityCreate",
    "ManualActivityUpdate",
    "ActivityResponse",
    "manual_columns",
]
