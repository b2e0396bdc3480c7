"""
Snap App service: create, fetch with view tracking, share counting, delete,
and social preview metadata.
"""

from __future__ import annotations

import uuid

import structlog

from app.core.errors import NotFoundError
from app.models.snap_app import SnapApp
from app.services.og_image import theme_for
from app.services.storage import SnapAppStorage
from snapbrief_shared.schemas.snap_apps import SnapAppCreate, SnapAppPreviewMeta

log = structlog.get_logger()


async def create_snap_app(req: SnapAppCreate, storage: SnapAppStorage) -> SnapApp:
    snap_app = await storage.create_snap_app(req)
    log.info("snap_app.created", snap_app_id=str(snap_app.id), type=snap_app.type)
    return snap_app


async def get_snap_app(
    snap_app_id: uuid.UUID, storage: SnapAppStorage, track_view: bool = True
) -> SnapApp:
    if track_view:
        snap_app = await storage.get_snap_app_with_view(snap_app_id)
    else:
        snap_app = await storage.get_snap_app(snap_app_id)
    if snap_app is None:
        raise NotFoundError("Snap App")
    return snap_app


async def record_share(snap_app_id: uuid.UUID, storage: SnapAppStorage) -> int:
    count = await storage.increment_share_count(snap_app_id)
    if count is None:
        raise NotFoundError("Snap App")
    return count


async def delete_snap_app(snap_app_id: uuid.UUID, storage: SnapAppStorage) -> None:
    if not await storage.delete_snap_app(snap_app_id):
        raise NotFoundError("Snap App")
    log.info("snap_app.deleted", snap_app_id=str(snap_app_id))


def preview_meta(snap_app: SnapApp, base_url: str) -> SnapAppPreviewMeta:
    """Open Graph / Twitter card fields for a Snap App share page."""
    theme = theme_for(snap_app.type)
    description = snap_app.subtitle or f"{theme.label} - {theme.description}"
    return SnapAppPreviewMeta(
        title=snap_app.title,
        description=description,
        image_url=f"{base_url.rstrip('/')}/api/v1/og/{snap_app.id}",
    )
