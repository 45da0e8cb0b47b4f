"""
Shared route dependencies.

- require_admin: Bearer-token guard for admin endpoints
- get_strava_oauth / get_strava_client: Strava HTTP handlers (overridable in tests)
"""

import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException

from runlog.config import settings
from runlog.features.strava import StravaClient, StravaOAuth
from runlog.shared.exceptions import AuthError, ConfigError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def check_bearer(authorization: Optional[str], admin_key: str) -> str:
    """
    Validate an Authorization header against the admin key.

    Args:
        authorization: Raw Authorization header value
        admin_key: Expected bearer secret

    Returns:
        The presented token

    Raises:
        AuthError: 401 if the header is missing or not a bearer header,
            403 if the token doesn't match
    """
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        raise AuthError("Unauthorized", status_code=401)

    token = authorization[len(BEARER_PREFIX):].strip()
    if not secrets.compare_digest(token.encode(), admin_key.encode()):
        raise AuthError("Forbidden", status_code=403)

    return token


async def require_admin(authorization: Optional[str] = Header(default=None)) -> None:
    """Reject requests without a valid admin bearer token."""
    try:
        admin_key = settings.require_admin_key()
    except ConfigError as e:
        logger.error(f"Admin authentication not configured: {e}")
        raise HTTPException(status_code=500, detail="Admin authentication not configured")

    try:
        check_bearer(authorization, admin_key)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


def get_strava_oauth() -> StravaOAuth:
    return StravaOAuth()


def get_strava_client() -> StravaClient:
    return StravaClient()
