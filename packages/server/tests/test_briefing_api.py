"""
Integration tests for the briefing subscription endpoints.

Runs against an in-memory SQLite database through the ASGI app.
"""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.core.errors import CollaboratorError
from app.services.storage import get_briefing_storage

ALICE = {"name": "Alice", "phone": "(555) 123-4567", "topics": ["AI"]}


async def _create(client: AsyncClient, body: dict = ALICE) -> dict:
    response = await client.post("/api/v1/briefings", json=body)
    assert response.status_code == 201, response.text
    return response.json()["subscription"]


class TestCreateBriefing:
    async def test_phone_subscriber_with_defaults(self, client: AsyncClient):
        response = await client.post("/api/v1/briefings", json=ALICE)
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        sub = data["subscription"]
        assert sub["userId"] == "phone:5551234567"
        assert sub["deliveryMethod"] == "imessage"
        assert sub["schedule"] == {
            "enabled": True,
            "time": "06:00",
            "timezone": "America/Los_Angeles",
            "daysOfWeek": [1, 2, 3, 4, 5],
        }
        assert sub["companies"] == []
        assert sub["isActive"] is True
        assert "lastDeliveredAt" not in sub
        assert data["message"] == (
            "Your daily briefing has been set up! "
            "You'll receive updates at 06:00 America/Los_Angeles."
        )

    async def test_email_method_without_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/briefings",
            json={"name": "Bob", "companies": ["Acme"], "deliveryMethod": "email"},
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": {
                "code": "MISSING_FIELD",
                "message": "Email is required for email delivery",
                "status": 400,
                "field": "email",
            },
        }

    async def test_missing_name(self, client: AsyncClient):
        response = await client.post("/api/v1/briefings", json={"topics": ["AI"], "phone": "1"})
        assert response.status_code == 400
        assert response.json()["error"]["field"] == "name"

    async def test_unknown_delivery_method_is_unprocessable(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/briefings", json={**ALICE, "deliveryMethod": "pigeon"}
        )
        assert response.status_code == 422

    async def test_invalid_schedule_is_unprocessable(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/briefings",
            json={**ALICE, "schedule": {"enabled": True, "time": "25:00", "timezone": "UTC", "daysOfWeek": [1]}},
        )
        assert response.status_code == 422

    async def test_webhook_subscriber_is_anonymous(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/briefings",
            json={
                "name": "Hook",
                "topics": ["AI"],
                "deliveryMethod": "webhook",
                "webhookUrl": "https://hooks.example.com/briefing",
            },
        )
        assert response.status_code == 201
        sub = response.json()["subscription"]
        assert sub["userId"].startswith("anon:")
        assert sub["deliveryMethod"] == "webhook"
        assert sub["webhookUrl"] == "https://hooks.example.com/briefing"

    async def test_custom_schedule_in_message(self, client: AsyncClient):
        schedule = {"enabled": True, "time": "07:15", "timezone": "Europe/London", "daysOfWeek": [1]}
        response = await client.post("/api/v1/briefings", json={**ALICE, "schedule": schedule})
        assert response.status_code == 201
        assert "07:15 Europe/London" in response.json()["message"]


class TestReadBriefing:
    async def test_get(self, client: AsyncClient):
        sub = await _create(client)
        response = await client.get(f"/api/v1/briefings/{sub['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["subscription"]["id"] == sub["id"]
        assert "deliveryHistory" not in data

    async def test_get_missing(self, client: AsyncClient):
        response = await client.get(f"/api/v1/briefings/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == {
            "code": "NOT_FOUND",
            "message": "Subscription not found",
            "status": 404,
        }

    async def test_malformed_id(self, client: AsyncClient):
        response = await client.get("/api/v1/briefings/not-a-uuid")
        assert response.status_code == 422

    async def test_list_by_user(self, client: AsyncClient):
        first = await _create(client)
        second = await _create(client, {**ALICE, "topics": ["Robotics"], "phone": "555.123.4567"})
        await _create(client, {"name": "Carol", "phone": "999", "topics": ["AI"]})

        response = await client.get("/api/v1/briefings", params={"userId": "phone:5551234567"})
        assert response.status_code == 200
        ids = [s["id"] for s in response.json()["subscriptions"]]
        assert ids == [second["id"], first["id"]]

    async def test_list_unknown_user_is_empty(self, client: AsyncClient):
        response = await client.get("/api/v1/briefings", params={"userId": "email:nobody@x.com"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "subscriptions": []}

    async def test_list_requires_user_id(self, client: AsyncClient):
        response = await client.get("/api/v1/briefings")
        assert response.status_code == 400
        assert response.json()["error"]["field"] == "userId"


class TestUpdateBriefing:
    async def test_deactivate_changes_only_is_active(self, client: AsyncClient):
        before = await _create(client)
        response = await client.patch(
            f"/api/v1/briefings/{before['id']}", json={"isActive": False}
        )
        assert response.status_code == 200
        after = response.json()["subscription"]
        assert after["isActive"] is False

        changed = {k for k in before if before[k] != after.get(k)}
        assert changed <= {"isActive", "updatedAt"}
        assert "isActive" in changed

    async def test_unknown_and_protected_keys_ignored(self, client: AsyncClient):
        before = await _create(client)
        response = await client.patch(
            f"/api/v1/briefings/{before['id']}",
            json={"name": "Alicia", "userId": "phone:1", "id": str(uuid.uuid4()), "viewCount": 9},
        )
        assert response.status_code == 200
        after = response.json()["subscription"]
        assert after["name"] == "Alicia"
        assert after["userId"] == before["userId"]
        assert after["id"] == before["id"]

    async def test_replace_schedule(self, client: AsyncClient):
        sub = await _create(client)
        schedule = {"enabled": False, "time": "20:00", "timezone": "Asia/Tokyo", "daysOfWeek": [0, 6]}
        response = await client.patch(f"/api/v1/briefings/{sub['id']}", json={"schedule": schedule})
        assert response.status_code == 200
        assert response.json()["subscription"]["schedule"] == schedule

    async def test_update_persists(self, client: AsyncClient):
        sub = await _create(client)
        await client.patch(f"/api/v1/briefings/{sub['id']}", json={"topics": ["Space"]})
        response = await client.get(f"/api/v1/briefings/{sub['id']}")
        assert response.json()["subscription"]["topics"] == ["Space"]

    async def test_null_name_rejected(self, client: AsyncClient):
        sub = await _create(client)
        response = await client.patch(f"/api/v1/briefings/{sub['id']}", json={"name": None})
        assert response.status_code == 422

    async def test_update_missing(self, client: AsyncClient):
        response = await client.patch(f"/api/v1/briefings/{uuid.uuid4()}", json={"isActive": False})
        assert response.status_code == 404


class TestDeleteBriefing:
    async def test_delete(self, client: AsyncClient):
        sub = await _create(client)
        response = await client.delete(f"/api/v1/briefings/{sub['id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Subscription deleted successfully"}

        response = await client.get(f"/api/v1/briefings/{sub['id']}")
        assert response.status_code == 404

    async def test_delete_with_history(self, client: AsyncClient):
        sub = await _create(client)
        await client.post(
            f"/api/v1/briefings/{sub['id']}/deliveries",
            json={"content": "Morning!", "status": "sent"},
        )
        response = await client.delete(f"/api/v1/briefings/{sub['id']}")
        assert response.status_code == 200

    async def test_delete_missing(self, client: AsyncClient):
        response = await client.delete(f"/api/v1/briefings/{uuid.uuid4()}")
        assert response.status_code == 404


class TestDeliveries:
    async def test_sent_delivery_stamps_last_delivered(self, client: AsyncClient):
        sub = await _create(client)
        response = await client.post(
            f"/api/v1/briefings/{sub['id']}/deliveries",
            json={
                "content": "Alice, here's your briefing.",
                "newsItems": [{"headline": "H", "source": "S", "url": "https://example.com"}],
                "status": "sent",
            },
        )
        assert response.status_code == 201
        delivery = response.json()["delivery"]
        assert delivery["status"] == "sent"
        assert delivery["newsItems"] == [{"headline": "H", "source": "S", "url": "https://example.com"}]

        response = await client.get(f"/api/v1/briefings/{sub['id']}")
        assert response.json()["subscription"]["lastDeliveredAt"] is not None

    async def test_failed_delivery_leaves_last_delivered(self, client: AsyncClient):
        sub = await _create(client)
        await client.post(
            f"/api/v1/briefings/{sub['id']}/deliveries",
            json={"content": "x", "status": "failed", "error": "carrier rejected"},
        )
        response = await client.get(f"/api/v1/briefings/{sub['id']}")
        assert "lastDeliveredAt" not in response.json()["subscription"]

    async def test_history_newest_first(self, client: AsyncClient):
        sub = await _create(client)
        for content in ("one", "two", "three"):
            await client.post(
                f"/api/v1/briefings/{sub['id']}/deliveries",
                json={"content": content, "status": "sent"},
            )
        response = await client.get(f"/api/v1/briefings/{sub['id']}", params={"history": "true"})
        history = response.json()["deliveryHistory"]
        assert [d["content"] for d in history] == ["three", "two", "one"]

    async def test_history_capped(self, client: AsyncClient):
        sub = await _create(client)
        for i in range(12):
            await client.post(
                f"/api/v1/briefings/{sub['id']}/deliveries",
                json={"content": str(i), "status": "sent"},
            )
        response = await client.get(f"/api/v1/briefings/{sub['id']}", params={"history": "true"})
        assert len(response.json()["deliveryHistory"]) == 10

    async def test_pending_status_rejected(self, client: AsyncClient):
        sub = await _create(client)
        response = await client.post(
            f"/api/v1/briefings/{sub['id']}/deliveries",
            json={"content": "x", "status": "pending"},
        )
        assert response.status_code == 422

    async def test_delivery_for_missing_subscription(self, client: AsyncClient):
        response = await client.post(
            f"/api/v1/briefings/{uuid.uuid4()}/deliveries",
            json={"content": "x", "status": "sent"},
        )
        assert response.status_code == 404


class _BrokenStorage:
    async def list_subscriptions_for_user(self, user_id):
        try:
            raise OperationalError("SELECT", {}, Exception("database is locked"))
        except OperationalError as exc:
            raise CollaboratorError("list_subscriptions_for_user") from exc


async def test_storage_failure_is_generic_500(test_app, client: AsyncClient):
    test_app.dependency_overrides[get_briefing_storage] = lambda: _BrokenStorage()
    response = await client.get("/api/v1/briefings", params={"userId": "phone:1"})
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "INTERNAL_ERROR", "message": "Internal server error", "status": 500},
    }
    assert "locked" not in response.text


async def test_database_failure_is_generic_500(session_factory, client: AsyncClient):
    async with session_factory() as session:
        await session.execute(text("DROP TABLE briefing_subscriptions"))
        await session.commit()

    response = await client.post("/api/v1/briefings", json=ALICE)
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "INTERNAL_ERROR", "message": "Internal server error", "status": 500},
    }
