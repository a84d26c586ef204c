"""
Application configuration.
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Noloco API
    noloco_base_url: str = "https://api.portals.noloco.io"
    noloco_api_version_prefix: str = "/v1"
    noloco_response_format: str = "graphql"

    # Pagination
    noloco_page_size_cap: int = 100  # server-side maximum for `first`
    noloco_default_limit: int = 50
    noloco_default_page_size: int = 10
    noloco_dropdown_page_size: int = 100
    noloco_manual_sample_size: int = 5

    # HTTP timeouts (seconds)
    api_timeout_connect: float = 5.0
    api_timeout_read: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "simple"

    @field_validator("noloco_page_size_cap", "noloco_default_limit", "noloco_default_page_size")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("page sizes and limits must be at least 1")
        return v

    @field_validator("noloco_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
