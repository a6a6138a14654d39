"""Application settings loaded from environment variables and `.env` files."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Primary application settings for the vidhost core and CLI."""

    mongodb_uri: str = Field(default="mongodb://localhost:27017", alias="MONGODB_URI")
    db_name: str = Field(default="vidhost", min_length=1, alias="DB_NAME")
    server_selection_timeout_ms: PositiveInt = Field(default=5000, alias="SERVER_SELECTION_TIMEOUT_MS")

    media_root: Path = Field(default=Path("media"), alias="MEDIA_ROOT")
    media_base_url: str = Field(default="http://localhost:8000/media", alias="MEDIA_BASE_URL")

    default_publish: bool = Field(default=True, alias="DEFAULT_PUBLISH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""

    return Settings()


__all__ = ["Settings", "get_settings"]
