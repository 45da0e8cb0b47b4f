"""
Admin Routes

Manual activity management and maintenance tasks.
All endpoints require the admin bearer token.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from runlog.api.deps import require_admin
from runlog.db.session import get_async_db
from runlog.features.activities import (
    ActivityRepository,
    ActivityResponse,
    ManualActivityCreate,
    ManualActivityUpdate,
    manual_columns,
)
from runlog.shared.exceptions import StoreError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _activity_body(activity) -> dict:
    return {"activity": ActivityResponse.model_validate(activity).model_dump(mode="json")}


# =============================================================================
# Manual Activities
# =============================================================================

@router.post("/activities", status_code=201)
async def create_activity(
    request: ManualActivityCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """Create a manually entered activity (miles/feet converted to meters)."""
    try:
        activity = await ActivityRepository(db).create_manual(**request.to_columns())
        await db.commit()
    except StoreError as e:
        await db.rollback()
        logger.error(f"Failed to create activity: {e}")
        return _error("Failed to create activity", 500)

    logger.info(f"Created manual activity {activity.id}")
    return _activity_body(activity)


@router.patch("/activities/{activity_id}")
async def update_activity(
    activity_id: int,
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Partially update a manual activity.

    Invalid fields are skipped; the request fails only if nothing usable remains.
    """
    if not isinstance(payload, dict):
        return _error("Invalid request body", 400)

    fields = ManualActivityUpdate.valid_fields(payload)
    if not fields:
        return _error("No valid fields to update", 400)

    try:
        activity = await ActivityRepository(db).update_manual(
            activity_id, **manual_columns(fields)
        )
        await db.commit()
    except StoreError as e:
        await db.rollback()
        logger.error(f"Failed to update activity {activity_id}: {e}")
        return _error("Failed to update activity", 500)

    if not activity:
        return _error("Activity not found", 404)

    return _activity_body(activity)


@router.delete("/activities/{activity_id}", status_code=204)
async def delete_activity(
    activity_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a manual activity (Strava rows can't be deleted)."""
    try:
        deleted = await ActivityRepository(db).delete_manual(activity_id)
        await db.commit()
    except StoreError as e:
        await db.rollback()
        logger.error(f"Failed to delete activity {activity_id}: {e}")
        return _error("Failed to delete activity", 500)

    if not deleted:
        return _error("Activity not found", 404)

    return Response(status_code=204)


# =============================================================================
# Maintenance
# =============================================================================

@router.post("/maintenance/strava-publicize")
async def publicize_strava_activities(db: AsyncSession = Depends(get_async_db)):
    """Mark every Strava-imported activity as public."""
    try:
        updated = await ActivityRepository(db).publicize_strava()
        await db.commit()
    except StoreError as e:
        await db.rollback()
        logger.error(f"Failed to publicize Strava activities: {e}")
        return _error(str(e), 500)

    logger.info(f"Publicized {updated} Strava activities")
    return {"updated": updated}
