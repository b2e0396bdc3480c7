"""
Briefing subscription service: create-time validation and normalization,
partial-update filtering, and the read/delete/delivery flows on top of the
storage collaborator.
"""

from __future__ import annotations

import re
import secrets
import uuid
from typing import Any, Callable, Mapping, Optional

import structlog

from app.core.errors import MissingFieldError, NotFoundError
from app.models.briefing import BriefingDelivery, BriefingSubscription
from app.services.storage import BriefingStorage
from snapbrief_shared.schemas.briefings import (
    BriefingSubscriptionCreate,
    BriefingSubscriptionDraft,
    DeliveryCreate,
    default_schedule,
)
from snapbrief_shared.schemas.common import DeliveryMethod

log = structlog.get_logger()

PHONE_METHODS = frozenset({DeliveryMethod.IMESSAGE, DeliveryMethod.SMS})

# Fields a PATCH may touch, by wire name. Everything else is dropped.
UPDATABLE_FIELDS = frozenset({
    "name",
    "email",
    "phone",
    "topics",
    "companies",
    "schedule",
    "deliveryMethod",
    "webhookUrl",
    "isActive",
})

DELIVERY_HISTORY_LIMIT = 10

_NON_DIGITS = re.compile(r"\D")


def _anonymous_token() -> str:
    return secrets.token_urlsafe(6)


def derive_user_id(
    phone: Optional[str],
    email: Optional[str],
    token_factory: Callable[[], str] = _anonymous_token,
) -> str:
    """Stable subscriber key: phone digits, else lowercased email, else random."""
    if phone:
        return f"phone:{_NON_DIGITS.sub('', phone)}"
    if email:
        return f"email:{email.lower()}"
    return f"anon:{token_factory()}"


def normalize_subscription(req: BriefingSubscriptionCreate) -> BriefingSubscriptionDraft:
    """Validate a create request and fill in defaults.

    Rules are checked in order and the first failure is raised as
    `MissingFieldError`: name, topic-or-company, then the contact field the
    delivery method needs.
    """
    if not req.name:
        raise MissingFieldError("name")

    if not req.topics and not req.companies:
        raise MissingFieldError("topic_or_company")

    method = req.delivery_method or DeliveryMethod.IMESSAGE
    if method in PHONE_METHODS and not req.phone:
        raise MissingFieldError("phone")
    if method == DeliveryMethod.EMAIL and not req.email:
        raise MissingFieldError("email")
    if method == DeliveryMethod.WEBHOOK and not req.webhook_url:
        raise MissingFieldError("webhookUrl")

    return BriefingSubscriptionDraft(
        user_id=derive_user_id(req.phone, req.email),
        name=req.name,
        email=req.email,
        phone=req.phone,
        topics=req.topics or [],
        companies=req.companies or [],
        schedule=req.schedule or default_schedule(),
        delivery_method=method,
        webhook_url=req.webhook_url,
    )


def filter_update_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only allow-listed keys the caller actually supplied."""
    return {key: payload[key] for key in UPDATABLE_FIELDS & payload.keys()}


def confirmation_message(schedule: Mapping[str, Any]) -> str:
    return (
        "Your daily briefing has been set up! "
        f"You'll receive updates at {schedule['time']} {schedule['timezone']}."
    )


async def create_subscription(
    req: BriefingSubscriptionCreate, storage: BriefingStorage
) -> tuple[BriefingSubscription, str]:
    """Validate, normalize and persist. Returns (subscription, confirmation)."""
    draft = normalize_subscription(req)
    subscription = await storage.create_subscription(draft)
    log.info(
        "briefing.created",
        subscription_id=str(subscription.id),
        delivery_method=subscription.delivery_method,
        topics=len(subscription.topics),
        companies=len(subscription.companies),
    )
    return subscription, confirmation_message(subscription.schedule)


async def get_subscription(
    subscription_id: uuid.UUID, storage: BriefingStorage
) -> BriefingSubscription:
    subscription = await storage.get_subscription(subscription_id)
    if subscription is None:
        raise NotFoundError("Subscription")
    return subscription


async def list_user_subscriptions(
    user_id: Optional[str], storage: BriefingStorage
) -> list[BriefingSubscription]:
    if not user_id:
        raise MissingFieldError("userId")
    return await storage.list_subscriptions_for_user(user_id)


async def update_subscription(
    subscription_id: uuid.UUID,
    payload: Mapping[str, Any],
    storage: BriefingStorage,
) -> BriefingSubscription:
    """Apply a partial update. Unknown or absent fields are never forwarded."""
    await get_subscription(subscription_id, storage)

    updates = filter_update_fields(payload)
    updated = await storage.update_subscription(subscription_id, updates)
    if updated is None:
        # Removed between the existence check and the write.
        raise NotFoundError("Subscription")

    log.info(
        "briefing.updated",
        subscription_id=str(subscription_id),
        fields=sorted(updates),
    )
    return updated


async def delete_subscription(
    subscription_id: uuid.UUID, storage: BriefingStorage
) -> None:
    if not await storage.delete_subscription(subscription_id):
        raise NotFoundError("Subscription")
    log.info("briefing.deleted", subscription_id=str(subscription_id))


async def get_delivery_history(
    subscription_id: uuid.UUID,
    storage: BriefingStorage,
    limit: int = DELIVERY_HISTORY_LIMIT,
) -> list[BriefingDelivery]:
    return await storage.get_delivery_history(subscription_id, limit)


async def record_delivery(
    subscription_id: uuid.UUID,
    report: DeliveryCreate,
    storage: BriefingStorage,
) -> BriefingDelivery:
    """Store a delivery report; a `sent` report stamps `lastDeliveredAt`."""
    await get_subscription(subscription_id, storage)
    delivery = await storage.record_delivery(
        subscription_id,
        report.content,
        report.news_items,
        report.status,
        report.error,
    )
    log.info(
        "briefing.delivery_recorded",
        subscription_id=str(subscription_id),
        status=report.status,
        news_items=len(report.news_items),
    )
    return delivery
