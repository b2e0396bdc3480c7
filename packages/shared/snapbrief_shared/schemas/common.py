from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DeliveryMethod(str, Enum):
    IMESSAGE = "imessage"
    SMS = "sms"
    EMAIL = "email"
    WEBHOOK = "webhook"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class SnapAppType(str, Enum):
    PRICE_COMPARISON = "price_comparison"
    PRODUCT_GALLERY = "product_gallery"
    ARTICLE = "article"
    MAP_VIEW = "map_view"
    AVAILABILITY = "availability"
    CODE_BLOCK = "code_block"
    DATA_TABLE = "data_table"
    SMART_CARD = "smart_card"
    PRICING_HEALTH = "pricing_health"
    INVESTOR_DASHBOARD = "investor_dashboard"


class InsightType(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    WARNING = "warning"


class CamelModel(BaseModel):
    """Snake_case attributes on the Python side, camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorDetail(BaseModel):
    code: str
    message: str
    status: int
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail
