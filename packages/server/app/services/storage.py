"""
Storage collaborators for briefing subscriptions and Snap Apps.

Route handlers depend on the `BriefingStorage` / `SnapAppStorage` protocols and
receive the SQL implementations through FastAPI dependencies, so tests can
swap in fakes. Every database failure is re-raised as `CollaboratorError`.
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Any, Mapping, Optional, Protocol

from fastapi import Depends
from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import get_session
from app.core.errors import CollaboratorError
from app.models.base import utcnow
from app.models.briefing import BriefingDelivery, BriefingSubscription
from app.models.snap_app import SnapApp
from snapbrief_shared.schemas.briefings import BriefingSubscriptionDraft, NewsItem
from snapbrief_shared.schemas.snap_apps import SnapAppCreate

# Wire name -> column for every field a partial update may touch.
_SUBSCRIPTION_COLUMNS = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "topics": "topics",
    "companies": "companies",
    "schedule": "schedule",
    "deliveryMethod": "delivery_method",
    "webhookUrl": "webhook_url",
    "isActive": "is_active",
}


@asynccontextmanager
async def _storage_errors(operation: str):
    try:
        yield
    except SQLAlchemyError as exc:
        raise CollaboratorError(operation) from exc


class BriefingStorage(Protocol):
    async def create_subscription(
        self, draft: BriefingSubscriptionDraft
    ) -> BriefingSubscription: ...

    async def get_subscription(
        self, subscription_id: uuid.UUID
    ) -> Optional[BriefingSubscription]: ...

    async def update_subscription(
        self, subscription_id: uuid.UUID, fields: Mapping[str, Any]
    ) -> Optional[BriefingSubscription]: ...

    async def delete_subscription(self, subscription_id: uuid.UUID) -> bool: ...

    async def list_subscriptions_for_user(
        self, user_id: str
    ) -> list[BriefingSubscription]: ...

    async def record_delivery(
        self,
        subscription_id: uuid.UUID,
        content: str,
        news_items: list[NewsItem],
        status: str,
        error: Optional[str] = None,
    ) -> BriefingDelivery: ...

    async def get_delivery_history(
        self, subscription_id: uuid.UUID, limit: int = 10
    ) -> list[BriefingDelivery]: ...


class SnapAppStorage(Protocol):
    async def create_snap_app(self, req: SnapAppCreate) -> SnapApp: ...

    async def get_snap_app(self, snap_app_id: uuid.UUID) -> Optional[SnapApp]: ...

    async def get_snap_app_with_view(
        self, snap_app_id: uuid.UUID
    ) -> Optional[SnapApp]: ...

    async def increment_share_count(self, snap_app_id: uuid.UUID) -> Optional[int]: ...

    async def delete_snap_app(self, snap_app_id: uuid.UUID) -> bool: ...


# ---------------------------------------------------------------------------
# SQL implementations
# ---------------------------------------------------------------------------


class SQLBriefingStorage:
    """Briefing subscriptions and delivery history in SQL tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_subscription(
        self, draft: BriefingSubscriptionDraft
    ) -> BriefingSubscription:
        subscription = BriefingSubscription(
            user_id=draft.user_id,
            name=draft.name,
            email=draft.email,
            phone=draft.phone,
            topics=list(draft.topics),
            companies=list(draft.companies),
            schedule=draft.schedule.model_dump(by_alias=True),
            delivery_method=draft.delivery_method.value,
            webhook_url=draft.webhook_url,
            is_active=True,
        )
        async with _storage_errors("create_subscription"):
            self.session.add(subscription)
            await self.session.commit()
            await self.session.refresh(subscription)
        return subscription

    async def get_subscription(
        self, subscription_id: uuid.UUID
    ) -> Optional[BriefingSubscription]:
        async with _storage_errors("get_subscription"):
            return await self.session.get(BriefingSubscription, subscription_id)

    async def update_subscription(
        self, subscription_id: uuid.UUID, fields: Mapping[str, Any]
    ) -> Optional[BriefingSubscription]:
        async with _storage_errors("update_subscription"):
            subscription = await self.session.get(BriefingSubscription, subscription_id)
            if subscription is None:
                return None
            for key, value in fields.items():
                setattr(subscription, _SUBSCRIPTION_COLUMNS[key], value)
            subscription.updated_at = utcnow()
            self.session.add(subscription)
            await self.session.commit()
            await self.session.refresh(subscription)
        return subscription

    async def delete_subscription(self, subscription_id: uuid.UUID) -> bool:
        async with _storage_errors("delete_subscription"):
            subscription = await self.session.get(BriefingSubscription, subscription_id)
            if subscription is None:
                return False
            await self.session.execute(
                delete(BriefingDelivery).where(
                    BriefingDelivery.subscription_id == subscription_id
                )
            )
            await self.session.delete(subscription)
            await self.session.commit()
        return True

    async def list_subscriptions_for_user(
        self, user_id: str
    ) -> list[BriefingSubscription]:
        async with _storage_errors("list_subscriptions_for_user"):
            result = await self.session.execute(
                select(BriefingSubscription)
                .where(BriefingSubscription.user_id == user_id)
                .order_by(BriefingSubscription.created_at.desc())
            )
            return list(result.scalars().all())

    async def record_delivery(
        self,
        subscription_id: uuid.UUID,
        content: str,
        news_items: list[NewsItem],
        status: str,
        error: Optional[str] = None,
    ) -> BriefingDelivery:
        now = utcnow()
        delivery = BriefingDelivery(
            subscription_id=subscription_id,
            content=content,
            news_items=[item.model_dump(by_alias=True, exclude_none=True) for item in news_items],
            status=status,
            error=error,
            delivered_at=now,
        )
        async with _storage_errors("record_delivery"):
            self.session.add(delivery)
            if status == "sent":
                subscription = await self.session.get(BriefingSubscription, subscription_id)
                if subscription is not None:
                    subscription.last_delivered_at = now
                    subscription.updated_at = now
                    self.session.add(subscription)
            await self.session.commit()
            await self.session.refresh(delivery)
        return delivery

    async def get_delivery_history(
        self, subscription_id: uuid.UUID, limit: int = 10
    ) -> list[BriefingDelivery]:
        async with _storage_errors("get_delivery_history"):
            result = await self.session.execute(
                select(BriefingDelivery)
                .where(BriefingDelivery.subscription_id == subscription_id)
                .order_by(BriefingDelivery.delivered_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())


class SQLSnapAppStorage:
    """Snap Apps with view/share counters in a SQL table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_snap_app(self, req: SnapAppCreate) -> SnapApp:
        snap_app = SnapApp(
            type=req.type.value,
            title=req.title,
            subtitle=req.subtitle,
            source_url=req.source_url,
            data=req.data,
            insights=[i.model_dump(mode="json") for i in req.insights],
            actions=[a.model_dump(mode="json", exclude_none=True) for a in req.actions],
            creator_id=req.creator_id,
            creator_name=req.creator_name,
            is_public=req.is_public,
        )
        async with _storage_errors("create_snap_app"):
            self.session.add(snap_app)
            await self.session.commit()
            await self.session.refresh(snap_app)
        return snap_app

    async def get_snap_app(self, snap_app_id: uuid.UUID) -> Optional[SnapApp]:
        async with _storage_errors("get_snap_app"):
            return await self.session.get(SnapApp, snap_app_id)

    async def _increment(self, snap_app_id: uuid.UUID, column: str) -> Optional[SnapApp]:
        counter = getattr(SnapApp, column)
        result = await self.session.execute(
            update(SnapApp)
            .where(SnapApp.id == snap_app_id)
            .values({column: counter + 1})
        )
        if result.rowcount == 0:
            return None
        await self.session.commit()
        snap_app = await self.session.get(SnapApp, snap_app_id)
        await self.session.refresh(snap_app)
        return snap_app

    async def get_snap_app_with_view(self, snap_app_id: uuid.UUID) -> Optional[SnapApp]:
        async with _storage_errors("get_snap_app_with_view"):
            return await self._increment(snap_app_id, "view_count")

    async def increment_share_count(self, snap_app_id: uuid.UUID) -> Optional[int]:
        async with _storage_errors("increment_share_count"):
            snap_app = await self._increment(snap_app_id, "share_count")
        return snap_app.share_count if snap_app else None

    async def delete_snap_app(self, snap_app_id: uuid.UUID) -> bool:
        async with _storage_errors("delete_snap_app"):
            snap_app = await self.session.get(SnapApp, snap_app_id)
            if snap_app is None:
                return False
            await self.session.delete(snap_app)
            await self.session.commit()
        return True


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


async def get_briefing_storage(
    session: AsyncSession = Depends(get_session),
) -> BriefingStorage:
    return SQLBriefingStorage(session)


async def get_snap_app_storage(
    session: AsyncSession = Depends(get_session),
) -> SnapAppStorage:
    return SQLSnapAppStorage(session)
