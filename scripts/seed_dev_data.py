#!/usr/bin/env python3
"""Seed a development database with sample briefing subscriptions and Snap Apps.

Usage:
    python scripts/seed_dev_data.py

Uses SNAP_DATABASE_URL (defaults to the local SQLite file).
"""

import asyncio

from app.core.database import get_session_context, init_db
from app.services import briefings as briefing_service
from app.services import snap_apps as snap_app_service
from app.services.storage import SQLBriefingStorage, SQLSnapAppStorage
from snapbrief_shared.schemas.briefings import BriefingSubscriptionCreate, DeliveryCreate, NewsItem
from snapbrief_shared.schemas.snap_apps import SnapAppCreate

SUBSCRIPTIONS = [
    BriefingSubscriptionCreate(name="Alice", phone="(555) 123-4567", topics=["AI", "Robotics"]),
    BriefingSubscriptionCreate(
        name="Bob",
        email="Bob@Example.com",
        companies=["Acme", "Globex"],
        delivery_method="email",
    ),
]

SNAP_APPS = [
    SnapAppCreate(
        type="price_comparison",
        title="Noise-cancelling headphones under $300",
        subtitle="Best prices across 5 retailers",
        data={"items": [{"store": "Shop A", "price": 279}, {"store": "Shop B", "price": 299}]},
    ),
    SnapAppCreate(type="article", title="What changed in the new EU AI Act", data={"points": []}),
]


async def seed():
    await init_db()

    async with get_session_context() as session:
        storage = SQLBriefingStorage(session)
        for req in SUBSCRIPTIONS:
            subscription, _ = await briefing_service.create_subscription(req, storage)
            await briefing_service.record_delivery(
                subscription.id,
                DeliveryCreate(
                    content=f"{subscription.name}, here's your daily briefing.",
                    news_items=[NewsItem(headline="Sample headline", source="Example News", url="https://example.com")],
                    status="sent",
                ),
                storage,
            )

        snap_storage = SQLSnapAppStorage(session)
        for req in SNAP_APPS:
            await snap_app_service.create_snap_app(req, snap_storage)

    print(f"✅ Seeded {len(SUBSCRIPTIONS)} subscriptions and {len(SNAP_APPS)} Snap Apps.")


if __name__ == "__main__":
    asyncio.run(seed())
