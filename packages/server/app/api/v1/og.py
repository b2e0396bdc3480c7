"""
Social preview images.

GET /api/v1/og/{id} — 1200x630 PNG card for a Snap App
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from app.core.config import get_settings
from app.core.errors import AppError
from app.services import og_image
from app.services.storage import SnapAppStorage, get_snap_app_storage

router = APIRouter()
log = structlog.get_logger()

_CACHE_HEADERS = {"Cache-Control": "public, max-age=300"}


def _png(content: bytes, status_code: int = 200) -> Response:
    return Response(
        content=content,
        media_type="image/png",
        status_code=status_code,
        headers=_CACHE_HEADERS if status_code == 200 else None,
    )


@router.get("/{snap_app_id}", response_class=Response)
async def snap_app_preview(
    snap_app_id: uuid.UUID,
    storage: SnapAppStorage = Depends(get_snap_app_storage),
):
    settings = get_settings()
    try:
        snap_app = await storage.get_snap_app(snap_app_id)
        if snap_app is None:
            card = await run_in_threadpool(og_image.render_not_found_card, settings.og_font_path)
            return _png(card, status_code=404)
        card = await run_in_threadpool(
            og_image.render_snap_app_card,
            snap_app,
            settings.og_font_path,
            settings.og_emoji_font_path,
        )
        return _png(card)
    except (AppError, OSError, ValueError) as exc:
        log.error("og.render_failed", snap_app_id=str(snap_app_id), error=repr(exc))
        card = await run_in_threadpool(og_image.render_fallback_card, settings.og_font_path)
        return _png(card, status_code=500)
