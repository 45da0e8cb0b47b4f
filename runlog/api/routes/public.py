"""
Public Routes

Read-only endpoints that need no authentication.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from runlog.db.session import get_async_db
from runlog.features.activities import ActivityRepository, ActivityResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/activities")
async def list_public_activities(db: AsyncSession = Depends(get_async_db)):
    """Public activities, newest first."""
    try:
        activities = await ActivityRepository(db).list_public()
    except SQLAlchemyError as e:
        logger.error(f"Public activities error: {e}")
        return JSONResponse({"error": "Failed to load activities"}, status_code=500)

    return {
        "activities": [
            ActivityResponse.model_validate(a).model_dump(mode="json")
            for a in activities
        ]
    }
