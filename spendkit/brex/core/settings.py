"""Runtime configuration loaded from the environment or a ``.env`` file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class BrexSettings(BaseSettings):
    """Brex API credentials plus engine limits."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(default=None, validation_alias="BREX_API_KEY")
    api_url: str = Field(
        default="https://platform.brexapis.com", validation_alias="BREX_API_URL"
    )
    timeout_seconds: float = Field(default=30.0, gt=0, validation_alias="BREX_TIMEOUT_SECONDS")

    # Size units (utf-8 bytes / 4) above which list payloads are summarized
    hard_token_limit: int = Field(default=24000, gt=0, validation_alias="BREX_HARD_TOKEN_LIMIT")
    default_page_size: int = Field(
        default=50, ge=1, le=100, validation_alias="BREX_DEFAULT_PAGE_SIZE"
    )
    default_max_items: int = Field(default=100, ge=1, validation_alias="BREX_DEFAULT_MAX_ITEMS")
    # Ceiling on upstream page requests per operation
    max_pages: int = Field(default=50, ge=1, validation_alias="BREX_MAX_PAGES")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


def load_settings() -> BrexSettings:
    """Build settings from the current environment."""
    return BrexSettings()
