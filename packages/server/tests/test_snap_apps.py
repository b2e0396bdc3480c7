"""
Integration tests for Snap App endpoints: create, view/share counters,
delete, and share-page metadata.
"""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient

from app.models.snap_app import SnapApp
from app.services.snap_apps import preview_meta

PRICE_APP = {
    "type": "price_comparison",
    "title": "Headphones under $300",
    "subtitle": "Best prices across 5 retailers",
    "sourceUrl": "https://example.com/search?q=headphones",
    "data": {"items": [{"store": "A", "price": 279}]},
    "insights": [{"icon": "💡", "text": "Shop A is cheapest", "type": "positive"}],
    "actions": [{"label": "Share", "icon": "share", "action": "share"}],
    "creatorName": "Alice",
}


async def _create(client: AsyncClient, body: dict = PRICE_APP) -> dict:
    response = await client.post("/api/v1/snap-apps", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateSnapApp:
    async def test_create(self, client: AsyncClient):
        app = await _create(client)
        assert app["type"] == "price_comparison"
        assert app["viewCount"] == 0
        assert app["shareCount"] == 0
        assert app["isPublic"] is True
        assert app["insights"][0]["type"] == "positive"
        assert app["data"] == PRICE_APP["data"]

    async def test_unknown_type_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/snap-apps", json={**PRICE_APP, "type": "hologram"})
        assert response.status_code == 422

    async def test_empty_title_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/snap-apps", json={**PRICE_APP, "title": ""})
        assert response.status_code == 422

    async def test_bad_source_url_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/snap-apps", json={**PRICE_APP, "sourceUrl": "not a url"})
        assert response.status_code == 422

    async def test_source_url_stored_as_sent(self, client: AsyncClient):
        app = await _create(client, {**PRICE_APP, "sourceUrl": "https://example.com"})
        assert app["sourceUrl"] == "https://example.com"


class TestViewTracking:
    async def test_each_get_counts_a_view(self, client: AsyncClient):
        app = await _create(client)
        first = await client.get(f"/api/v1/snap-apps/{app['id']}")
        second = await client.get(f"/api/v1/snap-apps/{app['id']}")
        assert first.json()["data"]["viewCount"] == 1
        assert second.json()["data"]["viewCount"] == 2

    async def test_track_view_false(self, client: AsyncClient):
        app = await _create(client)
        response = await client.get(f"/api/v1/snap-apps/{app['id']}", params={"trackView": "false"})
        assert response.status_code == 200
        assert response.json()["data"]["viewCount"] == 0

    async def test_unknown_stored_type_still_served(self, client: AsyncClient, session_factory):
        async with session_factory() as session:
            legacy = SnapApp(type="legacy_thing", title="Old card", data={})
            session.add(legacy)
            await session.commit()
            legacy_id = legacy.id

        response = await client.get(f"/api/v1/snap-apps/{legacy_id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["type"] == "legacy_thing"
        assert data["viewCount"] == 1

    async def test_missing(self, client: AsyncClient):
        response = await client.get(f"/api/v1/snap-apps/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Snap App not found"


class TestShare:
    async def test_share_increments(self, client: AsyncClient):
        app = await _create(client)
        await client.post(f"/api/v1/snap-apps/{app['id']}/share")
        response = await client.post(f"/api/v1/snap-apps/{app['id']}/share")
        assert response.status_code == 200
        assert response.json() == {"success": True, "shareCount": 2}

    async def test_share_missing(self, client: AsyncClient):
        response = await client.post(f"/api/v1/snap-apps/{uuid.uuid4()}/share")
        assert response.status_code == 404


class TestDelete:
    async def test_delete(self, client: AsyncClient):
        app = await _create(client)
        response = await client.delete(f"/api/v1/snap-apps/{app['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Snap App deleted successfully"
        response = await client.get(f"/api/v1/snap-apps/{app['id']}")
        assert response.status_code == 404

    async def test_delete_missing(self, client: AsyncClient):
        response = await client.delete(f"/api/v1/snap-apps/{uuid.uuid4()}")
        assert response.status_code == 404


class TestPreviewMeta:
    async def test_meta_endpoint(self, client: AsyncClient):
        app = await _create(client)
        response = await client.get(f"/api/v1/snap-apps/{app['id']}/meta")
        assert response.status_code == 200
        meta = response.json()
        assert meta["title"] == PRICE_APP["title"]
        assert meta["description"] == PRICE_APP["subtitle"]
        assert meta["imageUrl"].endswith(f"/api/v1/og/{app['id']}")
        assert meta["imageWidth"] == 1200
        assert meta["imageHeight"] == 630
        assert meta["twitterCard"] == "summary_large_image"

    async def test_meta_does_not_count_views(self, client: AsyncClient):
        app = await _create(client)
        await client.get(f"/api/v1/snap-apps/{app['id']}/meta")
        response = await client.get(f"/api/v1/snap-apps/{app['id']}", params={"trackView": "false"})
        assert response.json()["data"]["viewCount"] == 0

    def test_description_falls_back_to_type(self):
        snap_app = SnapApp(id=uuid.uuid4(), type="article", title="EU AI Act", data={})
        meta = preview_meta(snap_app, "https://snap.example.com/")
        assert meta.description == "Article Summary - Key points extracted from articles"
        assert meta.image_url == f"https://snap.example.com/api/v1/og/{snap_app.id}"

    def test_unknown_type_uses_default_theme(self):
        snap_app = SnapApp(id=uuid.uuid4(), type="legacy_widget", title="Old", data={})
        meta = preview_meta(snap_app, "https://snap.example.com")
        assert meta.description == "Smart Card - AI-generated smart summary"
