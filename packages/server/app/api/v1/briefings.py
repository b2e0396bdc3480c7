"""
Briefing subscription endpoints.

GET    /api/v1/briefings?userId=...             — List a user's subscriptions
POST   /api/v1/briefings                        — Create a subscription
GET    /api/v1/briefings/{id}?history=true      — Get one (optionally with deliveries)
PATCH  /api/v1/briefings/{id}                   — Partial update
DELETE /api/v1/briefings/{id}                   — Delete
POST   /api/v1/briefings/{id}/deliveries        — Record a delivery report
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.services import briefings as briefing_service
from app.services.storage import BriefingStorage, get_briefing_storage
from snapbrief_shared.schemas.briefings import (
    BriefingSubscriptionCreate,
    BriefingSubscriptionListResponse,
    BriefingSubscriptionRead,
    BriefingSubscriptionResponse,
    BriefingSubscriptionUpdate,
    DeliveryCreate,
    DeliveryRead,
    DeliveryResponse,
    MessageResponse,
)

router = APIRouter()


@router.get(
    "",
    response_model=BriefingSubscriptionListResponse,
    response_model_exclude_none=True,
)
async def list_briefings(
    user_id: Optional[str] = Query(None, alias="userId"),
    storage: BriefingStorage = Depends(get_briefing_storage),
):
    """List a subscriber's briefings, newest first."""
    subscriptions = await briefing_service.list_user_subscriptions(user_id, storage)
    return BriefingSubscriptionListResponse(
        subscriptions=[BriefingSubscriptionRead.model_validate(s) for s in subscriptions]
    )


@router.post(
    "",
    response_model=BriefingSubscriptionResponse,
    response_model_exclude_none=True,
    status_code=201,
)
async def create_briefing(
    body: BriefingSubscriptionCreate,
    storage: BriefingStorage = Depends(get_briefing_storage),
):
    """Create a briefing subscription with defaults applied."""
    subscription, message = await briefing_service.create_subscription(body, storage)
    return BriefingSubscriptionResponse(
        subscription=BriefingSubscriptionRead.model_validate(subscription),
        message=message,
    )


@router.get(
    "/{subscription_id}",
    response_model=BriefingSubscriptionResponse,
    response_model_exclude_none=True,
)
async def get_briefing(
    subscription_id: uuid.UUID,
    history: bool = False,
    storage: BriefingStorage = Depends(get_briefing_storage),
):
    subscription = await briefing_service.get_subscription(subscription_id, storage)
    response = BriefingSubscriptionResponse(
        subscription=BriefingSubscriptionRead.model_validate(subscription)
    )
    if history:
        deliveries = await briefing_service.get_delivery_history(subscription_id, storage)
        response.delivery_history = [DeliveryRead.model_validate(d) for d in deliveries]
    return response


@router.patch(
    "/{subscription_id}",
    response_model=BriefingSubscriptionResponse,
    response_model_exclude_none=True,
)
async def update_briefing(
    subscription_id: uuid.UUID,
    body: BriefingSubscriptionUpdate,
    storage: BriefingStorage = Depends(get_briefing_storage),
):
    """Update only the fields present in the request body."""
    payload = body.model_dump(mode="json", by_alias=True, exclude_unset=True)
    subscription = await briefing_service.update_subscription(
        subscription_id, payload, storage
    )
    return BriefingSubscriptionResponse(
        subscription=BriefingSubscriptionRead.model_validate(subscription)
    )


@router.delete("/{subscription_id}", response_model=MessageResponse)
async def delete_briefing(
    subscription_id: uuid.UUID,
    storage: BriefingStorage = Depends(get_briefing_storage),
):
    await briefing_service.delete_subscription(subscription_id, storage)
    return MessageResponse(message="Subscription deleted successfully")


@router.post(
    "/{subscription_id}/deliveries",
    response_model=DeliveryResponse,
    response_model_exclude_none=True,
    status_code=201,
)
async def record_briefing_delivery(
    subscription_id: uuid.UUID,
    body: DeliveryCreate,
    storage: BriefingStorage = Depends(get_briefing_storage),
):
    """Record the outcome of a delivery run for this subscription."""
    delivery = await briefing_service.record_delivery(subscription_id, body, storage)
    return DeliveryResponse(delivery=DeliveryRead.model_validate(delivery))
