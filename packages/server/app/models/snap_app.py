"""Snap App model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import JSONType, TimestampMixin, UUIDMixin


class SnapApp(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "snap_apps"

    type: str = Field(nullable=False)
    title: str = Field(nullable=False)
    subtitle: Optional[str] = None
    source_url: Optional[str] = None
    data: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    insights: list = Field(default_factory=list, sa_type=JSONType, nullable=False)
    actions: list = Field(default_factory=list, sa_type=JSONType, nullable=False)
    creator_id: Optional[str] = Field(default=None, index=True)
    creator_name: Optional[str] = None
    view_count: int = Field(default=0, nullable=False)
    share_count: int = Field(default=0, nullable=False)
    is_public: bool = Field(default=True, nullable=False)
