"""
Strava integration module.

Usage:
    from runlog.features.strava import StravaOAuth, StravaClient
    from runlog.features.strava.sync import StravaSyncService

Components:
- StravaOAuth: OAuth flow (auth URL, token exchange, refresh)
- StravaClient: API client (athlete, activity list, activity detail)
- get_valid_access_token: Token validity check with refresh
- StravaSyncService: Activity import

Models:
- StravaCredentials: OAuth credentials storage
"""

from .models import StravaCredentials
from .oauth import StravaOAuth
from .client import (
    StravaClient,
    StravaError,
    UpstreamAuthError,
    UpstreamFetchError,
    DetailEnrichmentError,
)
from .repository import StravaCredentialsRepository
from .tokens import (
    REFRESH_BUFFER,
    RefreshedToken,
    get_valid_access_token,
    refresh_credentials,
)

__all__ = [
    # Models
    "StravaCredentials",
    # OAuth
    "StravaOAuth",
    # Client
    "StravaClient",
    "StravaError",
    "UpstreamAuthError",
    "UpstreamFetchError",
    "DetailEnrichmentError",
    # Repositories
    "StravaCredentialsRepository",
    # Tokens
    "REFRESH_BUFFER",
    "RefreshedToken",
    "get_valid_access_token",
    "refresh_credentials",
]
