"""Application configuration."""

import logging
import os

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEV_HMAC_SECRET = "dev-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    hmac_secret: str = DEV_HMAC_SECRET
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    start_token_minutes: int = 10
    progress_token_minutes: int = 5
    completion_token_minutes: int = 1
    idle_timeout_minutes: int = 15
    sweep_interval_minutes: int = 5
    min_completion_step: int = 2
    welcome_message: str = "Welcome to Security Awareness Month!"
    completion_message: str = (
        "Congratulations! You've completed the Security Awareness experience!"
    )
    completion_redirect_url: str = "https://example.com/security-awareness"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _reject_dev_secret_in_production(self) -> "Settings":
        if self.environment == "production" and self.uses_default_secret:
            raise ValueError("HMAC_SECRET must be set in production")
        return self

    @property
    def uses_default_secret(self) -> bool:
        """Return true when the insecure development secret is in use."""
        return self.hmac_secret == DEV_HMAC_SECRET


def parse_log_level(raw: str | None) -> int:
    """Parse a logging level name from env, defaulting to INFO."""
    if raw is None:
        return logging.INFO
    cleaned = raw.strip().upper()
    if cleaned.isdigit():
        return int(cleaned)
    level = logging.getLevelName(cleaned)
    return level if isinstance(level, int) else logging.INFO
