from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from .common import CamelModel, InsightType, SnapAppType

_HTTP_URL = TypeAdapter(HttpUrl)


class SnapAppInsight(BaseModel):
    icon: str
    text: str
    type: InsightType


class SnapAppAction(BaseModel):
    label: str
    icon: str
    action: Literal["share", "save", "refresh", "open_url", "custom"]
    url: Optional[str] = None


class SnapAppCreate(CamelModel):
    type: SnapAppType
    title: str = Field(min_length=1, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=500)
    source_url: Optional[str] = None
    data: Dict[str, Any]
    insights: List[SnapAppInsight] = Field(default_factory=list)
    actions: List[SnapAppAction] = Field(default_factory=list)
    creator_id: Optional[str] = None
    creator_name: Optional[str] = None
    is_public: bool = True

    @field_validator("source_url")
    @classmethod
    def _valid_url(cls, value: Optional[str]) -> Optional[str]:
        # Validated as a URL but stored exactly as sent.
        if value is not None:
            try:
                _HTTP_URL.validate_python(value)
            except ValidationError:
                raise ValueError(f"Invalid URL '{value}'")
        return value


class SnapAppRead(CamelModel):
    id: UUID
    type: str  # rows may carry tags that are no longer in SnapAppType
    title: str
    subtitle: Optional[str] = None
    source_url: Optional[str] = None
    data: Dict[str, Any]
    insights: List[SnapAppInsight]
    actions: List[SnapAppAction]
    creator_id: Optional[str] = None
    creator_name: Optional[str] = None
    view_count: int = 0
    share_count: int = 0
    is_public: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SnapAppResponse(CamelModel):
    success: bool = True
    data: SnapAppRead


class ShareCountResponse(CamelModel):
    success: bool = True
    share_count: int


class SnapAppPreviewMeta(CamelModel):
    """Social share metadata (Open Graph / Twitter card) for a Snap App."""
    title: str
    description: str
    image_url: str
    image_width: int = 1200
    image_height: int = 630
    site_name: str = "Mino"
    twitter_card: str = "summary_large_image"


class SnapAppTypeMetadata(BaseModel):
    icon: str
    label: str
    color: str
    description: str


SNAP_APP_TYPE_METADATA: dict[SnapAppType, SnapAppTypeMetadata] = {
    SnapAppType.PRICE_COMPARISON: SnapAppTypeMetadata(
        icon="chart-bar", label="Price Comparison", color="#10B981",
        description="Compare prices across multiple sources",
    ),
    SnapAppType.PRODUCT_GALLERY: SnapAppTypeMetadata(
        icon="shopping-bag", label="Product Gallery", color="#8B5CF6",
        description="Visual product comparison grid",
    ),
    SnapAppType.ARTICLE: SnapAppTypeMetadata(
        icon="document-text", label="Article Summary", color="#3B82F6",
        description="Key points extracted from articles",
    ),
    SnapAppType.MAP_VIEW: SnapAppTypeMetadata(
        icon="map", label="Map View", color="#F59E0B",
        description="Geographic data visualization",
    ),
    SnapAppType.AVAILABILITY: SnapAppTypeMetadata(
        icon="calendar", label="Availability", color="#EC4899",
        description="Date/time availability tracker",
    ),
    SnapAppType.CODE_BLOCK: SnapAppTypeMetadata(
        icon="code", label="Code Block", color="#6366F1",
        description="Syntax-highlighted code snippets",
    ),
    SnapAppType.DATA_TABLE: SnapAppTypeMetadata(
        icon="table", label="Data Table", color="#14B8A6",
        description="Interactive data tables",
    ),
    SnapAppType.SMART_CARD: SnapAppTypeMetadata(
        icon="sparkles", label="Smart Card", color="#00D4FF",
        description="AI-generated smart summary",
    ),
    SnapAppType.PRICING_HEALTH: SnapAppTypeMetadata(
        icon="heart", label="Pricing Health", color="#FF2D55",
        description="Competitive pricing health dashboard",
    ),
    SnapAppType.INVESTOR_DASHBOARD: SnapAppTypeMetadata(
        icon="briefcase", label="Investor Dashboard", color="#1E40AF",
        description="Portfolio company news and updates for investors",
    ),
}
