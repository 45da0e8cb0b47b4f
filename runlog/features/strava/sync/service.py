"""
Strava sync orchestration.

Main entry point for importing activities.

Sync Flow:
1. Load the stored credentials
2. Get a valid access token (refreshing once if near expiry)
3. Fetch the latest activity page and enrich descriptions
4. Map activities to rows
5. Upsert rows keyed by strava_activity_id in one transaction
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from runlog.features.activities.repository import ActivityRepository
from ..client import StravaClient
from ..oauth import StravaOAuth
from ..repository import StravaCredentialsRepository
from ..tokens import get_valid_access_token
from .activities import ActivitySyncService
from .mapper import map_activity_to_row

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of a sync run."""

    imported: int
    upserted: int

    def to_dict(self) -> dict:
        return {"imported": self.imported, "upserted": self.upserted}


class StravaSyncService:
    """
    Main sync orchestrator.

    Any failure aborts the run: the transaction is rolled back
    and the typed error propagates to the caller.

    Usage:
        service = StravaSyncService(db)
        result = await service.sync()
    """

    def __init__(
        self,
        db: AsyncSession,
        client: Optional[StravaClient] = None,
        oauth: Optional[StravaOAuth] = None
    ):
        self.db = db
        self.oauth = oauth
        self.credentials_repo = StravaCredentialsRepository(db)
        self.activity_repo = ActivityRepository(db)
        self.activity_sync = ActivitySyncService(client)

    async def sync(self) -> SyncResult:
        """
        Import the latest Strava activities.

        Returns:
            SyncResult with fetched and inserted/changed counts

        Raises:
            CredentialsNotFound: If Strava was never connected
            ConfigError: If client credentials are missing for a refresh
            UpstreamAuthError: If the token refresh is rejected
            UpstreamFetchError: If the activity list can't be fetched
            StoreError: If credentials or activities can't be stored
        """
        try:
            credentials = await self.credentials_repo.load()
            athlete_id = credentials.athlete_id

            access_token = await get_valid_access_token(
                self.db, credentials, oauth=self.oauth
            )
            # Persist a rotated token even if the fetch below fails
            await self.db.commit()

            activities = await self.activity_sync.fetch_enriched_activities(access_token)
            rows = [map_activity_to_row(activity, athlete_id) for activity in activities]

            upserted = 0
            if rows:
                upserted = await self.activity_repo.upsert_strava_rows(rows)
                logger.info(
                    f"Upserted {upserted}/{len(rows)} Strava activities",
                    extra={
                        "event": "strava.upsert_batch",
                        "batch_size": len(rows),
                        "upserted": upserted,
                    }
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        result = SyncResult(imported=len(activities), upserted=upserted)
        logger.info(
            f"Strava sync complete for athlete {athlete_id}: "
            f"{result.imported} imported, {result.upserted} upserted",
            extra={"event": "strava.sync_complete", **result.to_dict()}
        )
        return result
