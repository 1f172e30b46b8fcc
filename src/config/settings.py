"""Suite settings using Pydantic Settings.

Centralized configuration for the end-to-end suite. Settings are read from
the environment (and an optional ``.env`` file) once at process start via
``get_settings()`` and are immutable afterwards; pass the resulting object
to whatever needs it.

Environment variables:
- APP_ENVIRONMENT, APP_LOG_LEVEL, APP_LOG_JSON
- RESILIENCE_*: retry, polling and circuit breaker timing
- BROWSER_*: browser choice, headless mode, timeouts, screenshot directory
- MASTODON_*: instance URL and test account credentials
"""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ResilienceSettings(BaseSettings):
    """Resilience patterns configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RESILIENCE_",
        extra="ignore",
        frozen=True,
    )

    # Retry settings
    retry_max_attempts: int = Field(default=3, ge=1, description="Max attempts per operation")
    retry_interval: float = Field(default=1.0, ge=0, description="Fixed delay between attempts in seconds")

    # Polling settings
    wait_timeout: float = Field(default=10.0, ge=0, description="Default wait deadline in seconds")
    poll_interval: float = Field(default=0.5, ge=0.001, description="Seconds between poll ticks")

    # Circuit breaker settings
    circuit_failure_threshold: int = Field(default=3, ge=1, description="Failures to open circuit")
    circuit_reset_timeout: float = Field(default=5.0, ge=0, description="Seconds before an open circuit closes")

    @model_validator(mode="after")
    def _warn_on_coarse_polling(self) -> "ResilienceSettings":
        if self.poll_interval > self.wait_timeout:
            logger.warning(
                f"RESILIENCE_POLL_INTERVAL ({self.poll_interval}s) exceeds "
                f"RESILIENCE_WAIT_TIMEOUT ({self.wait_timeout}s)"
            )
        return self


class BrowserSettings(BaseSettings):
    """Browser session configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_",
        extra="ignore",
        frozen=True,
    )

    name: Literal["chrome", "firefox"] = Field(default="chrome", description="Browser to launch")
    headless: bool = Field(default=True, description="Run without a visible window")
    implicit_wait: float = Field(default=0.0, ge=0, description="Implicit wait in seconds")
    page_load_timeout: float = Field(default=30.0, gt=0, description="Page load timeout in seconds")
    window_width: int = Field(default=1920, gt=0, description="Window width in pixels")
    window_height: int = Field(default=1080, gt=0, description="Window height in pixels")
    screenshot_dir: str = Field(default="test-screenshots", description="Where failure screenshots go")


class MastodonSettings(BaseSettings):
    """Mastodon instance and test account."""

    model_config = SettingsConfigDict(
        env_prefix="MASTODON_",
        extra="ignore",
        frozen=True,
    )

    base_url: str = Field(default="https://mastodon.social/home", description="Instance home URL")
    email: Optional[str] = Field(default=None, description="Test account email")
    password: Optional[SecretStr] = Field(default=None, description="Test account password")

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.password)


class Settings(BaseSettings):
    """Main suite settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    environment: str = Field(default="local", description="Environment name")
    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Emit JSON log lines")

    resilience: ResilienceSettings = Field(default_factory=ResilienceSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    mastodon: MastodonSettings = Field(default_factory=MastodonSettings)

    @property
    def is_ci(self) -> bool:
        return self.environment in ("ci", "staging")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached suite settings instance.

    Returns:
        Settings: Cached settings loaded from environment.
    """
    return Settings()
