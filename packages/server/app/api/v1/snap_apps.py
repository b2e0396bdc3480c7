"""
Snap App endpoints: create, fetch (with view tracking), share, delete, and
share-page metadata.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query

from app.core.config import get_settings
from app.services import snap_apps as snap_app_service
from app.services.storage import SnapAppStorage, get_snap_app_storage
from snapbrief_shared.schemas.briefings import MessageResponse
from snapbrief_shared.schemas.snap_apps import (
    ShareCountResponse,
    SnapAppCreate,
    SnapAppPreviewMeta,
    SnapAppRead,
    SnapAppResponse,
)

router = APIRouter()


@router.post("", response_model=SnapAppResponse, response_model_exclude_none=True, status_code=201)
async def create_snap_app(
    body: SnapAppCreate,
    storage: SnapAppStorage = Depends(get_snap_app_storage),
):
    snap_app = await snap_app_service.create_snap_app(body, storage)
    return SnapAppResponse(data=SnapAppRead.model_validate(snap_app))


@router.get("/{snap_app_id}", response_model=SnapAppResponse, response_model_exclude_none=True)
async def get_snap_app(
    snap_app_id: uuid.UUID,
    track_view: bool = Query(True, alias="trackView"),
    storage: SnapAppStorage = Depends(get_snap_app_storage),
):
    """Fetch a Snap App. Counts a view unless `trackView=false`."""
    snap_app = await snap_app_service.get_snap_app(snap_app_id, storage, track_view=track_view)
    return SnapAppResponse(data=SnapAppRead.model_validate(snap_app))


@router.get("/{snap_app_id}/meta", response_model=SnapAppPreviewMeta)
async def get_snap_app_meta(
    snap_app_id: uuid.UUID,
    storage: SnapAppStorage = Depends(get_snap_app_storage),
):
    """Open Graph / Twitter card metadata for the share page."""
    snap_app = await snap_app_service.get_snap_app(snap_app_id, storage, track_view=False)
    return snap_app_service.preview_meta(snap_app, get_settings().public_base_url)


@router.post("/{snap_app_id}/share", response_model=ShareCountResponse)
async def share_snap_app(
    snap_app_id: uuid.UUID,
    storage: SnapAppStorage = Depends(get_snap_app_storage),
):
    count = await snap_app_service.record_share(snap_app_id, storage)
    return ShareCountResponse(share_count=count)


@router.delete("/{snap_app_id}", response_model=MessageResponse)
async def delete_snap_app(
    snap_app_id: uuid.UUID,
    storage: SnapAppStorage = Depends(get_snap_app_storage),
):
    await snap_app_service.delete_snap_app(snap_app_id, storage)
    return MessageResponse(message="Snap App deleted successfully")
