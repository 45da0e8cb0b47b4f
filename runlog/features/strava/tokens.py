"""
Strava access token management.

Provides:
- refresh_credentials: Rotate the stored credentials via the refresh grant
- get_valid_access_token: Return a usable access token, refreshing if needed
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from runlog.shared.timeutils import parse_timestamp, utcnow
from .models import StravaCredentials
from .oauth import StravaOAuth
from .repository import StravaCredentialsRepository

logger = logging.getLogger(__name__)

# Refresh tokens that expire within this window
REFRESH_BUFFER = timedelta(minutes=2)


@dataclass
class RefreshedToken:
    """Token set returned by a successful refresh."""

    access_token: str
    refresh_token: str
    token_type: Optional[str]
    scope: Optional[str]
    expires_at: Optional[datetime]


def needs_refresh(expires_at, now: Optional[datetime] = None) -> bool:
    """
    Check whether a token expiring at expires_at should be refreshed.

    Unknown or unparseable expiry always needs a refresh.
    """
    expires = parse_timestamp(expires_at)
    if expires is None:
        return True
    now = parse_timestamp(now) or utcnow()
    return expires - REFRESH_BUFFER <= now


async def refresh_credentials(
    db: AsyncSession,
    refresh_token: str,
    oauth: Optional[StravaOAuth] = None
) -> RefreshedToken:
    """
    Exchange a refresh token for a new token set and persist it.

    The stored row is matched by the refresh token being replaced, so if a
    concurrent refresh already rotated it, the update matches nothing and
    StoreError is raised.

    Args:
        db: Database session (not committed here)
        refresh_token: Current refresh token
        oauth: OAuth handler (default: StravaOAuth())

    Returns:
        RefreshedToken with the new tokens

    Raises:
        ConfigError: If client credentials are not configured
        UpstreamAuthError: If Strava rejects the refresh
        StoreError: If the new tokens could not be stored
    """
    oauth = oauth or StravaOAuth()
    token_json = await oauth.refresh_token(refresh_token)

    refreshed = RefreshedToken(
        access_token=token_json["access_token"],
        refresh_token=token_json["refresh_token"],
        token_type=token_json.get("token_type"),
        scope=token_json.get("scope"),
        expires_at=parse_timestamp(token_json.get("expires_at")),
    )

    fields = dict(
        access_token=refreshed.access_token,
        refresh_token=refreshed.refresh_token,
        scope=refreshed.scope,
        expires_at=refreshed.expires_at,
    )
    # Keep the stored token_type when the response omits it
    if refreshed.token_type:
        fields["token_type"] = refreshed.token_type

    repo = StravaCredentialsRepository(db)
    await repo.update_by_refresh_token(refresh_token, **fields)

    return refreshed


async def get_valid_access_token(
    db: AsyncSession,
    credentials: Optional[StravaCredentials] = None,
    *,
    oauth: Optional[StravaOAuth] = None,
    now: Optional[datetime] = None
) -> str:
    """
    Get a valid access token, refreshing at most once if it is near expiry.

    Args:
        db: Database session
        credentials: Already loaded credentials (loaded if omitted)
        oauth: OAuth handler used for the refresh
        now: Current time override

    Returns:
        Access token string

    Raises:
        CredentialsNotFound: If no credentials are stored
        ConfigError, UpstreamAuthError, StoreError: If the refresh fails
    """
    if credentials is None:
        credentials = await StravaCredentialsRepository(db).load()

    if not needs_refresh(credentials.expires_at, now):
        return credentials.access_token

    logger.info(
        f"Refreshing Strava token for athlete {credentials.athlete_id}",
        extra={
            "event": "strava.token_refresh",
            "athlete_id": credentials.athlete_id,
            "expires_at": str(credentials.expires_at),
        }
    )
    refreshed = await refresh_credentials(db, credentials.refresh_token, oauth=oauth)
    return refreshed.access_token
