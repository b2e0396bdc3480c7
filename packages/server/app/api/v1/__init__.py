"""
API v1 Router
"""

from fastapi import APIRouter
from . import briefings, og, snap_apps

router = APIRouter()

router.include_router(briefings.router, prefix="/briefings", tags=["Briefings"])
router.include_router(snap_apps.router, prefix="/snap-apps", tags=["Snap Apps"])
router.include_router(og.router, prefix="/og", tags=["Preview Images"])


@router.get("/", tags=["API"])
async def api_root():
    """API root — returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/briefings",
            "/briefings/{id}",
            "/briefings/{id}/deliveries",
            "/snap-apps",
            "/snap-apps/{id}",
            "/snap-apps/{id}/meta",
            "/snap-apps/{id}/share",
            "/og/{id}",
        ],
    }
