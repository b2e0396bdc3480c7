# SQLModel definitions — imported here to ensure metadata is populated for Alembic.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .briefing import BriefingSubscription, BriefingDelivery  # noqa: F401
from .snap_app import SnapApp  # noqa: F401
