"""Briefing subscription and delivery models."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin, utcnow


class BriefingSubscription(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "briefing_subscriptions"

    user_id: str = Field(nullable=False, index=True)  # phone:<digits> | email:<addr> | anon:<token>
    name: str = Field(nullable=False)
    email: Optional[str] = None
    phone: Optional[str] = None
    topics: list = Field(default_factory=list, sa_type=JSONType, nullable=False)
    companies: list = Field(default_factory=list, sa_type=JSONType, nullable=False)
    schedule: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    delivery_method: str = Field(default="imessage", nullable=False)  # imessage | sms | email | webhook
    webhook_url: Optional[str] = None
    is_active: bool = Field(default=True, nullable=False)
    last_delivered_at: Optional[datetime] = Field(
        default=None, sa_type=sa.DateTime(timezone=True)
    )


class BriefingDelivery(UUIDMixin, SQLModel, table=True):
    __tablename__ = "briefing_deliveries"

    subscription_id: uuid.UUID = Field(
        foreign_key="briefing_subscriptions.id", nullable=False, index=True
    )
    content: str = Field(nullable=False)
    news_items: list = Field(default_factory=list, sa_type=JSONType, nullable=False)
    status: str = Field(nullable=False)  # pending | sent | failed
    error: Optional[str] = None
    delivered_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
