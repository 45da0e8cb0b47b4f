"""
Activity repository.

Data access layer for activities, covering both the Strava upsert path
and the manual admin CRUD.
"""

import logging
from itertools import groupby
from typing import Any

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from runlog.shared.exceptions import StoreError
from runlog.shared.repository import BaseRepository
from runlog.shared.timeutils import parse_timestamp
from .models import Activity, ActivitySource

logger = logging.getLogger(__name__)

PUBLIC_LIST_LIMIT = 100


class ActivityRepository(BaseRepository[Activity]):
    """Repository for activities."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def get_by_strava_id(self, strava_activity_id: int) -> Activity | None:
        """
        Get activity by Strava activity ID.

        Args:
            strava_activity_id: Strava's activity ID

        Returns:
            Activity if found, None otherwise
        """
        return await self.get_by(strava_activity_id=strava_activity_id)

    async def list_public(self, limit: int = PUBLIC_LIST_LIMIT) -> list[Activity]:
        """
        Get public activities, newest first.

        Args:
            limit: Maximum activities to return

        Returns:
            List of public activities
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.is_public.is_(True))
            .order_by(desc(Activity.start_time))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def upsert_strava_rows(self, rows: list[dict[str, Any]]) -> int:
        """
        Insert or update Strava-sourced rows keyed by strava_activity_id.

        Rows are grouped by their key sets so that an omitted column
        (e.g. avg_hr) is left untouched on existing rows rather than nulled.

        Does not commit; the caller owns the transaction.

        Args:
            rows: Normalized rows from map_activity_to_row()

        Returns:
            Number of rows inserted or changed

        Raises:
            StoreError: If the database rejects the write
        """
        prepared = [self._prepare_row(row) for row in rows]

        def _keys(row: dict) -> tuple:
            return tuple(sorted(row))

        affected = 0
        try:
            for _, group in groupby(sorted(prepared, key=_keys), key=_keys):
                affected += await self.upsert(
                    list(group),
                    conflict_key="strava_activity_id",
                    touch={"updated_at": func.now()},
                )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to upsert Strava activities: {e}") from e

        return affected

    async def create_manual(self, **fields) -> Activity:
        """
        Create a manually entered activity.

        Raises:
            StoreError: If the insert fails
        """
        try:
            return await self.create(source=ActivitySource.MANUAL, **fields)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create activity: {e}") from e

    async def get_manual(self, activity_id: int) -> Activity | None:
        """Get a manual activity by ID (Strava rows are not editable)."""
        return await self.get_by(id=activity_id, source=ActivitySource.MANUAL)

    async def update_manual(self, activity_id: int, **fields) -> Activity | None:
        """
        Update a manual activity.

        Returns:
            Updated activity, None if no manual activity has this ID

        Raises:
            StoreError: If the update fails
        """
        try:
            activity = await self.get_manual(activity_id)
            if not activity:
                return None
            return await self.update(activity, **fields)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update activity {activity_id}: {e}") from e

    async def delete_manual(self, activity_id: int) -> bool:
        """
        Delete a manual activity.

        Returns:
            True if a row was deleted

        Raises:
            StoreError: If the delete fails
        """
        try:
            activity = await self.get_manual(activity_id)
            if not activity:
                return False
            await self.delete(activity)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete activity {activity_id}: {e}") from e
        return True

    async def publicize_strava(self) -> int:
        """
        Mark every Strava-sourced activity as public.

        Returns:
            Number of rows updated

        Raises:
            StoreError: If the update fails
        """
        try:
            result = await self.db.execute(
                update(Activity)
                .where(Activity.source == ActivitySource.STRAVA)
                .values(is_public=True)
            )
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to publicize Strava activities: {e}") from e
        return result.rowcount or 0

    @staticmethod
    def _prepare_row(row: dict[str, Any]) -> dict[str, Any]:
        """Convert the mapper's ISO start_time into a datetime column value."""
        prepared = dict(row)
        start_time = parse_timestamp(prepared.get("start_time"))
        if start_time is None:
            raise StoreError(f"Invalid start_time for activity {row.get('strava_activity_id')}")
        prepared["start_time"] = start_time
        return prepared
