"""
Service settings.

Values come from environment variables prefixed ``WORKKRD_`` or a local
``.env`` file. List settings accept JSON arrays or comma-separated values.
"""

import json
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Work.krd render service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WORKKRD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Server ---
    host: str = "127.0.0.1"
    port: int = 8100
    log_level: str = "INFO"
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"]
    )

    # --- Storage ---
    db_path: Path = _PACKAGE_ROOT / "data" / "workkrd.db"
    fonts_dir: Path = _PACKAGE_ROOT / "resources" / "fonts"

    # --- Browser ---
    production: bool = False
    chrome_path: str | None = None
    chromium_pack_url: str | None = None
    chromium_cache_dir: Path = Path("/tmp/workkrd-chromium")

    # --- Render pool ---
    max_concurrent_pages: int = Field(default=3, ge=1)
    browser_idle_timeout: float = Field(default=30.0, gt=0)
    max_render_queue: int | None = Field(default=None, ge=1)
    content_timeout: float = 30.0
    font_ready_timeout: float = 10.0
    pdf_timeout: float = 30.0

    # --- Guardrails ---
    csrf_token_ttl: int = 600
    # reverse proxies in front of the service that append to X-Forwarded-For
    trusted_proxy_hops: int = Field(default=0, ge=0)

    # --- Identity (upstream auth gateway) ---
    admin_user_ids: Annotated[list[str], NoDecode] = Field(default_factory=list)
    premium_user_ids: Annotated[list[str], NoDecode] = Field(default_factory=list)

    @field_validator("cors_origins", "admin_user_ids", "premium_user_ids", mode="before")
    @classmethod
    def _split_csv(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(settings: Settings) -> Settings:
    """Install explicit settings (tests, embedding)."""
    global _settings
    _settings = settings
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
