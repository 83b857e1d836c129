"""Application configuration using Pydantic Settings.

Loads settings from environment variables and .env file.
All settings have sensible defaults for local development.
"""

from __future__ import annotations

import json
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_rater.services.extractors.base import ExtractionConfig
from content_rater.services.extractors.browser import BrowserConfig

# Valid Python logging levels
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Service-wide configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Server ---
    service_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 15020
    debug: bool = False

    # --- Logging ---
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Falls back to INFO if an invalid level is provided.
        """
        normalized = v.upper().strip()
        if normalized not in VALID_LOG_LEVELS:
            # Log a warning (to stderr since logging may not be configured yet)
            import sys

            print(
                f"WARNING: Invalid LOG_LEVEL '{v}'. "
                f"Valid levels are: {', '.join(sorted(VALID_LOG_LEVELS))}. "
                "Falling back to INFO.",
                file=sys.stderr,
            )
            return "INFO"
        return normalized

    def get_log_level_int(self) -> int:
        """Return the integer value of the configured log level."""
        return getattr(logging, self.log_level, logging.INFO)

    # --- Fallback HTTP fetch ---
    url_fetch_timeout: int = 30  # seconds
    fallback_user_agent: str = (
        "Mozilla/5.0 (compatible; content-rater/0.1; +article-extraction)"
    )

    # --- Content limits ---
    max_content_length: int = 2000  # chars kept in ArticleContent.content
    min_content_length: int = 100  # chars required for meta-tag-only structured data

    # --- Browser rendering (Playwright) ---
    browser_rendering_enabled: bool = True
    playwright_headless: bool = True
    browser_user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    browser_viewport_width: int = 1280
    browser_viewport_height: int = 800
    navigation_timeout_ms: int = 30000

    # --- CORS ---
    cors_origins: str = "http://localhost:15000,http://localhost:3000"

    def get_cors_origins(self) -> list[str]:
        """Parse cors_origins as JSON list or comma-separated string."""
        raw = self.cors_origins.strip()
        if raw.startswith("["):
            return json.loads(raw)
        return [o.strip() for o in raw.split(",") if o.strip()]

    def extraction_config(self) -> ExtractionConfig:
        """Engine-level view of the extraction settings."""
        return ExtractionConfig(
            timeout_seconds=self.url_fetch_timeout,
            max_content_length=self.max_content_length,
            min_content_length=self.min_content_length,
            user_agent=self.fallback_user_agent,
        )

    def browser_config(self) -> BrowserConfig:
        return BrowserConfig(
            headless=self.playwright_headless,
            user_agent=self.browser_user_agent,
            viewport_width=self.browser_viewport_width,
            viewport_height=self.browser_viewport_height,
            navigation_timeout_ms=self.navigation_timeout_ms,
        )


settings = Settings()
