"""
Strava activity to storage row mapping.
"""

from typing import Any

from runlog.features.activities.models import ActivitySource
from runlog.shared.timeutils import to_iso_utc
from runlog.shared.units import round_half_away_from_zero
from .config import SyncConfig


def _non_empty(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _round_optional(value) -> int | None:
    return round_half_away_from_zero(value) if value is not None else None


def map_activity_to_row(activity: dict, athlete_id: int) -> dict[str, Any]:
    """
    Map a (possibly enriched) Strava activity summary to an activities row.

    avg_hr is only included when Strava reports a heart rate, so an upsert
    never clears a stored value. New rows are always private.

    Args:
        activity: Strava activity dict
        athlete_id: Strava athlete ID of the stored credentials

    Returns:
        Row dict for ActivityRepository.upsert_strava_rows()
    """
    activity_type = (
        _non_empty(activity.get("sport_type"))
        or _non_empty(activity.get("type"))
        or SyncConfig.DEFAULT_ACTIVITY_TYPE
    )
    name = activity.get("name")

    row = {
        "start_time": to_iso_utc(activity["start_date"]),
        "distance_m": round_half_away_from_zero(activity["distance"]),
        "moving_time_s": round_half_away_from_zero(activity["moving_time"]),
        "elev_gain_m": _round_optional(activity.get("total_elevation_gain")),
        "type": activity_type,
        "notes": _non_empty(activity.get("description")) or name,
        "title": name,
        "source": ActivitySource.STRAVA,
        "is_public": False,
        "strava_activity_id": activity["id"],
        "strava_athlete_id": athlete_id,
    }

    heartrate = activity.get("average_heartrate")
    if heartrate is not None:
        row["avg_hr"] = round_half_away_from_zero(heartrate)

    return row
