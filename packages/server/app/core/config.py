"""
Application configuration loaded from environment variables.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Snap Briefings server configuration."""

    model_config = SettingsConfigDict(env_prefix="SNAP_", env_file=".env", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./snap_briefings.db"

    # Logging
    log_level: str = "info"
    log_format: Literal["json", "text"] = "json"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Public URL used when building share links and preview image URLs
    public_base_url: str = "http://localhost:8000"

    # Preview cards
    og_font_path: Optional[str] = None
    og_emoji_font_path: Optional[str] = None

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
