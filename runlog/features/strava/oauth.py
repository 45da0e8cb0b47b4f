"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens
- Token refresh
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from runlog.config import settings
from runlog.shared.exceptions import ConfigError
from .client import UpstreamAuthError

logger = logging.getLogger(__name__)


class StravaOAuth:
    """
    Strava OAuth handler.

    Client credentials are read from settings at call time, so a missing
    STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET raises ConfigError on use.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.get_authorization_url(
            redirect_uri="https://example.com/api/strava/callback",
            state="runlog"
        )
        tokens = await oauth.exchange_code(code)
        tokens = await oauth.refresh_token(refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/api/v3/oauth/token"

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.strava_timeout_seconds

    def get_authorization_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        scope: Optional[str] = None
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Args:
            redirect_uri: URL to redirect after authorization
            state: Optional state parameter echoed back on the callback
            scope: OAuth scope (default: settings.strava_scopes)

        Returns:
            Authorization URL string
        """
        if not settings.strava_client_id:
            raise ConfigError("Missing STRAVA_CLIENT_ID")

        params = {
            "client_id": settings.strava_client_id,
            "response_type": "code",
            "redirect_uri": redirect_uri,
            "scope": scope or settings.strava_scopes,
            "approval_prompt": "auto",
        }
        if state:
            params["state"] = state

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def _post_token(self, data: dict, action: str) -> dict:
        client_id, client_secret = settings.require_strava_client()
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout
            ) as client:
                response = await client.post(
                    self.TOKEN_URL,
                    data={
                        "client_id": client_id,
                        "client_secret": client_secret,
                        **data,
                    }
                )
        except httpx.HTTPError as e:
            raise UpstreamAuthError(f"Token {action} request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Strava token {action} failed: {response.status_code} {response.text}")
            raise UpstreamAuthError(
                f"Token {action} failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text
            )

        return response.json()

    async def exchange_code(self, code: str) -> dict:
        """
        Exchange authorization code for tokens.

        Args:
            code: Authorization code from Strava callback

        Returns:
            {
                "token_type": "Bearer",
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890,
                "athlete": {"id": 123, "firstname": "...", ...}
            }

        Raises:
            ConfigError: If client credentials are not configured
            UpstreamAuthError: If token exchange fails
        """
        return await self._post_token(
            {"code": code, "grant_type": "authorization_code"},
            "exchange"
        )

    async def refresh_token(self, refresh_token: str) -> dict:
        """
        Refresh an expired access token.

        Args:
            refresh_token: Current refresh token

        Returns:
            {
                "token_type": "Bearer",
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890
            }

        Raises:
            ConfigError: If client credentials are not configured
            UpstreamAuthError: If token refresh fails
        """
        return await self._post_token(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"},
            "refresh"
        )
