"""
Strava Routes

Endpoints for Strava integration:
- /strava/authorize - Initiate OAuth flow
- /strava/callback - Handle OAuth callback, store credentials
- /strava/sync - Import latest activities (admin)
- /strava/test - Fetch the connected athlete (admin)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from runlog.api.deps import get_strava_client, get_strava_oauth, require_admin
from runlog.config import settings
from runlog.db.session import get_async_db
from runlog.features.strava import (
    StravaClient,
    StravaCredentialsRepository,
    StravaError,
    StravaOAuth,
    UpstreamAuthError,
    UpstreamFetchError,
    get_valid_access_token,
)
from runlog.features.strava.sync import StravaSyncService
from runlog.shared.exceptions import (
    ConfigError,
    CredentialsNotFound,
    RunlogError,
    StoreError,
)
from runlog.shared.timeutils import parse_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/strava", tags=["Strava"])


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _redirect_with_status(request: Request, status: str) -> RedirectResponse:
    return RedirectResponse(url=str(request.url.replace(path="/", query=f"strava={status}")))


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/authorize")
async def strava_authorize(oauth: StravaOAuth = Depends(get_strava_oauth)):
    """Redirect to the Strava consent page."""
    if not settings.strava_client_id:
        return _error("Missing STRAVA_CLIENT_ID", 500)

    redirect_uri = settings.strava_redirect_uri
    if not redirect_uri:
        return _error("Missing STRAVA_REDIRECT_URI", 500)

    if settings.is_production and "localhost" in redirect_uri:
        return _error("STRAVA_REDIRECT_URI must not point to localhost in production", 500)

    auth_url = oauth.get_authorization_url(
        redirect_uri=redirect_uri,
        state=settings.strava_oauth_state,
        scope=settings.strava_scopes
    )
    logger.info("Strava OAuth initiated")
    return RedirectResponse(url=auth_url)


@router.get("/callback")
async def strava_callback(
    request: Request,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth),
):
    """
    Handle Strava OAuth callback.

    Exchanges the code for tokens and stores them keyed by athlete ID.
    """
    if error:
        logger.warning(f"Strava authorization error: {error}")
        return _redirect_with_status(request, "error")

    if state != settings.strava_oauth_state:
        logger.warning("Invalid Strava OAuth state")
        return _redirect_with_status(request, "error")

    if not code:
        return _error("Missing code", 400)

    try:
        settings.require_strava_client()
    except ConfigError as e:
        return _error(str(e), 500)

    try:
        token_data = await oauth.exchange_code(code)
        athlete = token_data["athlete"]
        credentials = dict(
            athlete_id=athlete["id"],
            athlete_username=athlete.get("username"),
            athlete_firstname=athlete.get("firstname"),
            athlete_lastname=athlete.get("lastname"),
            access_token=token_data["access_token"],
            refresh_token=token_data["refresh_token"],
            token_type=token_data.get("token_type") or "Bearer",
            scope=token_data.get("scope"),
            expires_at=parse_timestamp(token_data.get("expires_at")),
        )
    except (StravaError, KeyError, TypeError) as e:
        logger.error(f"Strava token exchange failed: {e}")
        return _redirect_with_status(request, "token_error")

    try:
        await StravaCredentialsRepository(db).save(**credentials)
        await db.commit()
    except StoreError as e:
        await db.rollback()
        logger.error(f"Failed to store Strava credentials: {e}")
        return _redirect_with_status(request, "store_error")

    logger.info(f"Strava connected for athlete {credentials['athlete_id']}")
    return _redirect_with_status(request, "connected")


# =============================================================================
# Admin Operations
# =============================================================================

@router.post("/sync", dependencies=[Depends(require_admin)])
async def strava_sync(
    db: AsyncSession = Depends(get_async_db),
    client: StravaClient = Depends(get_strava_client),
    oauth: StravaOAuth = Depends(get_strava_oauth),
):
    """Import the latest Strava activities."""
    service = StravaSyncService(db, client=client, oauth=oauth)
    try:
        result = await service.sync()
    except CredentialsNotFound as e:
        logger.error(f"Strava credentials load failed: {e}")
        return _error("Strava credentials missing or invalid", 500)
    except (ConfigError, UpstreamAuthError) as e:
        logger.error(f"Strava access token error: {e} {getattr(e, 'body', '') or ''}")
        return _error("Failed to refresh Strava access token", 500)
    except StoreError as e:
        logger.error(f"Strava store error: {e}")
        return _error("Failed to store Strava data", 500)
    except RunlogError as e:
        logger.error(f"Strava sync error: {e} {getattr(e, 'body', '') or ''}")
        return _error("Failed to sync Strava activities", 500)
    except Exception:
        logger.exception("Unexpected Strava sync failure")
        return _error("Failed to sync Strava activities", 500)

    return result.to_dict()


@router.get("/test", dependencies=[Depends(require_admin)])
async def strava_test(
    db: AsyncSession = Depends(get_async_db),
    client: StravaClient = Depends(get_strava_client),
    oauth: StravaOAuth = Depends(get_strava_oauth),
):
    """Check the stored connection by fetching the athlete profile."""
    try:
        access_token = await get_valid_access_token(db, oauth=oauth)
        await db.commit()
        athlete = await client.get_athlete(access_token)
    except UpstreamFetchError as e:
        logger.error(f"Strava athlete API error: {e} {e.body or ''}")
        return _error("Failed to fetch Strava athlete", 502)
    except RunlogError as e:
        await db.rollback()
        logger.error(f"Strava test route error: {e}")
        return _error(str(e), 500)

    return {"athlete": athlete}
