"""
Strava API client.

Provides methods for interacting with the Strava API.
Handles authentication headers, timeouts and error mapping.

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day

Rate limit usage is reported in the X-RateLimit-* response headers
and logged at debug level.
"""

import logging
from typing import Optional

import httpx

from runlog.config import settings
from runlog.shared.exceptions import RunlogError

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class StravaError(RunlogError):
    """Base Strava error."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamAuthError(StravaError):
    """Token exchange or refresh rejected by Strava."""
    pass


class UpstreamFetchError(StravaError):
    """Activity list (or other API) request failed."""
    pass


class DetailEnrichmentError(StravaError):
    """Single activity detail request failed."""
    pass


# =============================================================================
# Strava Client
# =============================================================================

class StravaClient:
    """
    Async client for the Strava API.

    Every call takes an already valid access token; token management
    lives in runlog.features.strava.tokens.

    Usage:
        client = StravaClient()
        athlete = await client.get_athlete(token)
        activities = await client.list_activities(token)
        detail = await client.get_activity(token, activities[0]["id"])
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.strava_timeout_seconds

    async def _get(
        self,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None,
        error_class: type[StravaError] = UpstreamFetchError
    ):
        """
        Make an authenticated GET request.

        Raises:
            error_class: On transport failure, non-2xx response or a body
                that isn't JSON
        """
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout
            ) as client:
                response = await client.get(
                    f"{self.API_URL}{endpoint}",
                    headers={"Authorization": f"Bearer {access_token}"},
                    params=params
                )
        except httpx.HTTPError as e:
            raise error_class(f"Strava request {endpoint} failed: {e}") from e

        # Log rate limit headers from Strava
        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if not response.is_success:
            raise error_class(
                f"Strava API error on {endpoint}: {response.status_code}",
                status_code=response.status_code,
                body=response.text
            )

        try:
            return response.json()
        except ValueError as e:
            raise error_class(
                f"Strava API returned invalid JSON on {endpoint}",
                status_code=response.status_code,
                body=response.text
            ) from e

    async def get_athlete(self, access_token: str) -> dict:
        """Get authenticated athlete profile."""
        return await self._get("/athlete", access_token)

    async def list_activities(self, access_token: str, per_page: int = 50) -> list[dict]:
        """
        Get the most recent page of athlete activities.

        Only the first page is fetched; there is no pagination or retry.

        Args:
            access_token: Valid access token
            per_page: Results per page

        Raises:
            UpstreamFetchError: If the request fails
        """
        return await self._get(
            "/athlete/activities",
            access_token,
            params={"per_page": per_page}
        )

    async def get_activity(self, access_token: str, activity_id: int) -> dict:
        """
        Get detailed activity info (used for the full description).

        Raises:
            DetailEnrichmentError: If the request fails
        """
        return await self._get(
            f"/activities/{activity_id}",
            access_token,
            params={"include_all_efforts": "false"},
            error_class=DetailEnrichmentError
        )
