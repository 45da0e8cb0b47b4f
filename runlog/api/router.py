"""
API Router

Combines all route modules.
"""

from fastapi import APIRouter

from runlog.api.routes import admin, public, strava

api_router = APIRouter()

api_router.include_router(strava.router)
api_router.include_router(public.router)
api_router.include_router(admin.router)
