"""
Strava sync services.

Provides:
- StravaSyncService: Main sync orchestrator
- ActivitySyncService: Activity fetching and detail enrichment
- map_activity_to_row: Strava activity to storage row mapping
"""

from .service import StravaSyncService, SyncResult
from .activities import ActivitySyncService
from .mapper import map_activity_to_row
from .config import SyncConfig

__all__ = [
    # Services
    "StravaSyncService",
    "SyncResult",
    "ActivitySyncService",
    # Mapping
    "map_activity_to_row",
    # Config
    "SyncConfig",
]
