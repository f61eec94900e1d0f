"""Configuration settings for the Aegis backend.

This module is the single source of truth for all application configuration.
It uses Pydantic BaseSettings to load and validate environment variables.
All other modules must import from here rather than using os.getenv() directly.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class AppSettings(BaseSettings):
    """Application settings loaded and validated from environment variables.

    Required fields without default values will raise a validation error
    if they are not provided in the environment or the .env file.
    """

    # App Settings
    APP_NAME: str = "Aegis"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # Database Settings
    DATABASE_URL: str = "sqlite:///./aegis.db"
    DATABASE_ECHO: bool = False

    # Security Settings
    # Fernet key protecting monitored asset values at rest
    ENCRYPTION_KEY: str
    BCRYPT_ROUNDS: int = 12

    # Redis & Celery Settings
    REDIS_URL: str = "redis://localhost:6379/0"
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    SCAN_INTERVAL_HOURS: int = 6

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Module-level singleton instance for application-wide use.
# A missing ENCRYPTION_KEY fails here, at import time.
settings = AppSettings()


@lru_cache()
def get_settings() -> AppSettings:
    """Return the application settings singleton instance.

    Designed to be used with FastAPI's Depends() mechanism for dependency
    injection in route handlers.

    Returns:
        The validated AppSettings singleton instance.
    """
    return settings
