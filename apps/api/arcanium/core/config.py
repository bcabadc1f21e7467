"""Application configuration for the marketplace demo."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..models import PLACEHOLDER_IMAGE


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    seed_demo_data: bool = Field(default=True)
    placeholder_image: str = Field(default=PLACEHOLDER_IMAGE)
    notice_text: str = Field(
        default="This is not a live site. It is a concept of how Arcanium plans to work."
    )
    identifier_width: int = Field(default=3, ge=1)
    enforce_collateral_order: bool = Field(default=True)

    session_ttl_seconds: int = Field(default=3600, ge=1)
    max_image_bytes: int = Field(default=5 * 1024 * 1024, ge=1)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return parts
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
