"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from layermark.textmap.models import InsertMode

logger = logging.getLogger(__name__)

# src/layermark/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class RenderConfig(BaseModel):
    """Markup output options."""

    default_tag: str = "mark"
    strategy: Literal["two_pass", "patched"] = "two_pass"

    @field_validator("default_tag")
    @classmethod
    def _tag_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "RENDER__DEFAULT_TAG must not be blank"
            raise ValueError(msg)
        return value.strip()


class PatternConfig(BaseModel):
    """How registered patterns are folded into a map."""

    overlay_ranges: bool = True
    mode: InsertMode = InsertMode.SEGMENT


class AppConfig(BaseModel):
    """Command-line runtime configuration."""

    log_dir: Path = Path("logs")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``RENDER__DEFAULT_TAG``, ``PATTERNS__OVERLAY_RANGES``, ``APP__LOG_DIR``.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    render: RenderConfig = RenderConfig()
    patterns: PatternConfig = PatternConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()
    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.debug("Settings: no .env file found, using env vars and defaults")
    return settings
