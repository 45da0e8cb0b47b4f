"""
Activity fetching.

Handles fetching the activity list from the Strava API and enriching
each summary with the description from its detail endpoint.
"""

import asyncio
import logging
from typing import Optional

from ..client import StravaClient
from .config import SyncConfig

logger = logging.getLogger(__name__)


class ActivitySyncService:
    """
    Service for fetching activities from Strava.

    Handles:
    - Fetching the most recent page of activity summaries
    - Concurrent detail enrichment with bounded parallelism
    - Tolerating per-activity detail failures
    """

    def __init__(
        self,
        client: Optional[StravaClient] = None,
        concurrency: int = SyncConfig.DETAIL_CONCURRENCY
    ):
        self.client = client or StravaClient()
        self.concurrency = concurrency

    async def fetch_enriched_activities(
        self,
        access_token: str,
        per_page: int = SyncConfig.ACTIVITIES_PER_PAGE
    ) -> list[dict]:
        """
        Fetch activity summaries and enrich them with full descriptions.

        Args:
            access_token: Valid Strava access token
            per_page: Number of summaries to fetch

        Returns:
            Summaries in Strava's order, each with a "description" key

        Raises:
            UpstreamFetchError: If the activity list can't be fetched
        """
        summaries = await self.client.list_activities(access_token, per_page=per_page)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def enrich(summary: dict) -> dict:
            async with semaphore:
                return await self._enrich(access_token, summary)

        return list(await asyncio.gather(*(enrich(s) for s in summaries)))

    async def _enrich(self, access_token: str, summary: dict) -> dict:
        """Merge the detail description into a summary, falling back on failure."""
        fallback = summary.get("description")
        try:
            detail = await self.client.get_activity(access_token, summary["id"])
        except Exception as e:
            # One bad detail call never aborts the batch
            logger.warning(
                f"Failed to enrich Strava activity {summary.get('id')}: {e!r}",
                extra={
                    "event": "strava.detail_enrichment_failed",
                    "activity_id": summary.get("id"),
                    "status_code": getattr(e, "status_code", None),
                }
            )
            return {**summary, "description": fallback}

        description = detail.get("description") if isinstance(detail, dict) else None
        return {
            **summary,
            "description": description if description is not None else fallback,
        }
