"""
Strava repositories.

Data access layer for the stored Strava credentials.
"""

import logging

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from runlog.shared.exceptions import CredentialsNotFound, StoreError
from runlog.shared.repository import BaseRepository
from .models import StravaCredentials

logger = logging.getLogger(__name__)


class StravaCredentialsRepository(BaseRepository[StravaCredentials]):
    """
    Repository for Strava OAuth credentials.

    Writes that are expected to hit an existing row raise StoreError
    when they match nothing, so a stale or rotated credential is never
    silently ignored.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, StravaCredentials)

    async def load(self) -> StravaCredentials:
        """
        Load the stored credentials.

        Returns:
            Most recently updated credentials row

        Raises:
            CredentialsNotFound: If no credentials are stored
            StoreError: If the database read fails
        """
        try:
            result = await self.db.execute(
                select(StravaCredentials)
                .order_by(desc(StravaCredentials.updated_at))
                .limit(1)
            )
            credentials = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load Strava credentials: {e}") from e

        if credentials is None:
            raise CredentialsNotFound("Strava credentials not found")
        return credentials

    async def save(self, athlete_id: int, **fields) -> None:
        """
        Create or overwrite credentials keyed by athlete ID.

        Args:
            athlete_id: Strava athlete ID (conflict key)
            **fields: Column values (access_token, refresh_token, ...)

        Raises:
            StoreError: If the write fails or affects no rows
        """
        try:
            affected = await self.upsert(
                [{"athlete_id": athlete_id, **fields}],
                conflict_key="athlete_id",
                touch={"updated_at": func.now()},
                only_if_changed=False,
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to store Strava credentials: {e}") from e

        if affected == 0:
            raise StoreError(f"No Strava credentials were stored for athlete {athlete_id}")

    async def update_by_refresh_token(self, old_refresh_token: str, **fields) -> int:
        """
        Rotate credentials matched by their current refresh token.

        Args:
            old_refresh_token: The refresh token being replaced
            **fields: New column values

        Returns:
            Number of rows updated

        Raises:
            StoreError: If the update fails or no row holds this refresh token
        """
        try:
            result = await self.db.execute(
                update(StravaCredentials)
                .where(StravaCredentials.refresh_token == old_refresh_token)
                .values(updated_at=func.now(), **fields)
                .execution_options(synchronize_session=False)
            )
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update Strava credentials: {e}") from e

        updated = result.rowcount or 0
        if updated == 0:
            raise StoreError("No Strava credentials were updated during refresh")
        return updated
