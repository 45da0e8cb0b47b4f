"""
Shared utilities (NOT business logic).

Usage:
    from runlog.shared import BaseRepository, round_half_away_from_zero
    from runlog.shared.timeutils import to_iso_utc
"""
from .exceptions import (
    RunlogError,
    ConfigError,
    AuthError,
    StoreError,
    NotFound,
    CredentialsNotFound,
)
from .units import (
    MILES_TO_METERS,
    FEET_TO_METERS,
    round_half_away_from_zero,
    miles_to_meters,
    meters_to_miles,
    feet_to_meters,
    meters_to_feet,
    pace_seconds_per_mile,
)
from .timeutils import utcnow, as_utc, parse_timestamp, to_iso_utc
from .repository import BaseRepository

__all__ = [
    # exceptions
    "RunlogError",
    "ConfigError",
    "AuthError",
    "StoreError",
    "NotFound",
    "CredentialsNotFound",
    # units
    "MILES_TO_METERS",
    "FEET_TO_METERS",
    "round_half_away_from_zero",
    "miles_to_meters",
    "meters_to_miles",
    "feet_to_meters",
    "meters_to_feet",
    "pace_seconds_per_mile",
    # time
    "utcnow",
    "as_utc",
    "parse_timestamp",
    "to_iso_utc",
    # repository
    "BaseRepository",
]
