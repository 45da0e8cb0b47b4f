"""
Strava sync configuration constants.

Contains all configuration values for sync behavior.
"""


class SyncConfig:
    """Configuration for sync behavior."""

    # How many activities to fetch per sync (single page, newest first)
    ACTIVITIES_PER_PAGE = 50

    # Max in-flight activity detail requests during enrichment
    DETAIL_CONCURRENCY = 10

    # Type used when Strava reports neither sport_type nor type
    DEFAULT_ACTIVITY_TYPE = "Run"
