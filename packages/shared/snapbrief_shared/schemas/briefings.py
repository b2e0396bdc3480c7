"""
Briefing subscription schemas shared between the API server and delivery workers.

Covers: subscription create/update/read shapes, the delivery schedule,
delivery reports and history.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator

from .common import CamelModel, DeliveryMethod, DeliveryStatus

DEFAULT_DELIVERY_TIME = "06:00"
DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_DAYS_OF_WEEK = [1, 2, 3, 4, 5]  # Mon-Fri, 0 = Sunday

DayOfWeek = Annotated[int, Field(ge=0, le=6)]


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------

class BriefingSchedule(CamelModel):
    """When a briefing goes out. Supplied schedules must be complete."""
    enabled: bool
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="HH:MM, 24h")
    timezone: str
    days_of_week: List[DayOfWeek]

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{value}'")
        return value


def default_schedule() -> BriefingSchedule:
    return BriefingSchedule(
        enabled=True,
        time=DEFAULT_DELIVERY_TIME,
        timezone=DEFAULT_TIMEZONE,
        days_of_week=list(DEFAULT_DAYS_OF_WEEK),
    )


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class BriefingSubscriptionCreate(CamelModel):
    """Raw create payload. Every field is optional here; cross-field rules
    are enforced by the subscription normalizer so the first violated rule
    can be reported by name."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    topics: Optional[List[str]] = None
    companies: Optional[List[str]] = None
    schedule: Optional[BriefingSchedule] = None
    delivery_method: Optional[DeliveryMethod] = None
    webhook_url: Optional[str] = None

    @field_validator("delivery_method", mode="before")
    @classmethod
    def _blank_method_is_default(cls, value):
        return value or None


class BriefingSubscriptionDraft(CamelModel):
    """A validated, fully-defaulted subscription ready for storage."""
    user_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    companies: List[str] = Field(default_factory=list)
    schedule: BriefingSchedule = Field(default_factory=default_schedule)
    delivery_method: DeliveryMethod = DeliveryMethod.IMESSAGE
    webhook_url: Optional[str] = None


_NON_NULLABLE_UPDATES = ("name", "topics", "companies", "schedule", "delivery_method", "is_active")


class BriefingSubscriptionUpdate(CamelModel):
    """Partial update. Only explicitly supplied keys are applied."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    topics: Optional[List[str]] = None
    companies: Optional[List[str]] = None
    schedule: Optional[BriefingSchedule] = None
    delivery_method: Optional[DeliveryMethod] = None
    webhook_url: Optional[str] = None
    is_active: Optional[bool] = None

    # Absent keys keep their defaults without running this; explicit nulls do.
    @field_validator(*_NON_NULLABLE_UPDATES, mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class NewsItem(CamelModel):
    headline: str
    source: str
    url: str
    company: Optional[str] = None


class DeliveryCreate(CamelModel):
    """Report of one briefing delivery attempt."""
    content: str
    news_items: List[NewsItem] = Field(default_factory=list)
    status: Literal["sent", "failed"]
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class BriefingSubscriptionRead(CamelModel):
    id: UUID
    user_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    topics: List[str]
    companies: List[str]
    schedule: BriefingSchedule
    delivery_method: DeliveryMethod
    webhook_url: Optional[str] = None
    is_active: bool
    last_delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DeliveryRead(CamelModel):
    id: UUID
    subscription_id: UUID
    content: str
    news_items: List[NewsItem]
    status: DeliveryStatus
    error: Optional[str] = None
    delivered_at: datetime

    model_config = {"from_attributes": True}


class BriefingSubscriptionResponse(CamelModel):
    success: bool = True
    subscription: BriefingSubscriptionRead
    message: Optional[str] = None
    delivery_history: Optional[List[DeliveryRead]] = None


class BriefingSubscriptionListResponse(CamelModel):
    success: bool = True
    subscriptions: List[BriefingSubscriptionRead]


class DeliveryResponse(CamelModel):
    success: bool = True
    delivery: DeliveryRead


class MessageResponse(CamelModel):
    success: bool = True
    message: str
