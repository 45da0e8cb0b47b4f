"""
Activity database model.

One row per recorded run, either entered manually or imported from Strava.
"""

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String, Text, func

from runlog.models.base import Base
from runlog.shared.units import pace_seconds_per_mile


class ActivitySource:
    """Values of Activity.source."""

    MANUAL = "manual"
    STRAVA = "strava"


class Activity(Base):
    """
    A single running activity.

    Strava-sourced rows are keyed by strava_activity_id so re-syncing
    the same remote activity updates the row instead of duplicating it.
    """

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)

    start_time = Column(DateTime(timezone=True), nullable=False, index=True)

    # Core metrics (metric units, rounded)
    distance_m = Column(Integer, nullable=False)
    moving_time_s = Column(Integer, nullable=False)
    elev_gain_m = Column(Integer, nullable=True)
    avg_hr = Column(Integer, nullable=True)

    # Descriptive
    type = Column(String(50), nullable=True)
    title = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    shoe = Column(String(100), nullable=True)
    perceived_exertion = Column(Integer, nullable=True)

    # Origin and visibility
    source = Column(String(20), nullable=False, default=ActivitySource.MANUAL, index=True)
    is_public = Column(Boolean, nullable=False, default=False, index=True)

    # Strava identifiers
    strava_activity_id = Column(BigInteger, unique=True, nullable=True)
    strava_athlete_id = Column(BigInteger, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Activity {self.id} {self.source} {self.distance_m}m>"

    @property
    def avg_pace_s(self) -> int | None:
        """Average pace in seconds per mile."""
        return pace_seconds_per_mile(self.distance_m, self.moving_time_s)
