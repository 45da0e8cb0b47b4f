"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy.

Note: Feature models are imported lazily to avoid circular imports.
Use direct imports from features/ modules when possible.
"""

from runlog.models.base import Base


def _get_activity_models():
    """Lazy import of Activity models."""
    from runlog.features.activities.models import Activity
    return Activity


def _get_strava_models():
    """Lazy import of Strava models."""
    from runlog.features.strava.models import StravaCredentials
    return StravaCredentials


def __getattr__(name):
    if name == "Activity":
        return _get_activity_models()
    if name == "StravaCredentials":
        return _get_strava_models()

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Base",
    "Activity",
    "StravaCredentials",
]
