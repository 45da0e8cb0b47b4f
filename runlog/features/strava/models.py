"""
Strava-related database models.

Models:
- StravaCredentials: OAuth credentials for the connected athlete
"""

from sqlalchemy import BigInteger, Column, DateTime, String, Text, func

from runlog.models.base import Base


class StravaCredentials(Base):
    """
    Strava OAuth credential storage.

    Single-athlete: one row keyed by the Strava athlete ID. Created on the
    first OAuth authorization and rotated in place on every token refresh.
    Tokens should be encrypted in production.
    """

    __tablename__ = "strava_credentials"

    athlete_id = Column(BigInteger, primary_key=True, autoincrement=False)

    # Strava athlete info
    athlete_username = Column(String(255), nullable=True)
    athlete_firstname = Column(String(255), nullable=True)
    athlete_lastname = Column(String(255), nullable=True)

    # OAuth tokens (should be encrypted in production)
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False, index=True)
    token_type = Column(String(50), nullable=False, default="Bearer")
    scope = Column(String(255), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StravaCredentials athlete_id={self.athlete_id}>"
