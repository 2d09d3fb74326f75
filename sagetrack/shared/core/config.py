from functools import lru_cache
from threading import Lock
from typing import Optional
import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator

# Environment Constants
ENV_PRODUCTION = "production"
ENV_DEVELOPMENT = "development"


@lru_cache
def get_settings() -> "Settings":
    """Returns a singleton instance of the application settings."""
    return Settings()


_settings_reload_lock = Lock()


def reload_settings_from_environment() -> "Settings":
    """
    Atomically rebuild and replace cached settings from environment values.

    This avoids mutating the cached singleton instance in-place.
    """
    logger = structlog.get_logger()
    with _settings_reload_lock:
        logger.info("settings_reload_started")
        get_settings.cache_clear()
        refreshed = get_settings()
        logger.info("settings_reload_completed")
        return refreshed


class Settings(BaseSettings):
    """
    Main configuration for sagetrack.
    Uses Pydantic-Settings for environment variable parsing from .env.
    """

    APP_NAME: str = "sagetrack"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = ENV_DEVELOPMENT
    TESTING: bool = False

    # AWS connection. Region falls back to the botocore resolution chain when unset.
    AWS_REGION: Optional[str] = None
    AWS_PROFILE: Optional[str] = None
    AWS_ENDPOINT_URL: Optional[str] = None  # e.g. a local SageMaker stub
    AWS_CONNECT_TIMEOUT_SECONDS: float = 10.0
    AWS_READ_TIMEOUT_SECONDS: float = 30.0

    # Retry policy for list queries
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_BACKOFF_SECONDS: float = 0.5
    RETRY_MAX_BACKOFF_SECONDS: float = 10.0
    RETRY_BACKOFF_MULTIPLIER: float = 2.0
    RETRY_JITTER: bool = True

    # Hard stop for paginated scans in unusually large accounts
    SAGEMAKER_MAX_PAGES: int = 100
    # Deadline for one full inventory fan-out (None = no deadline)
    INVENTORY_TIMEOUT_SECONDS: Optional[float] = None

    @model_validator(mode="after")
    def validate_all_config(self) -> "Settings":
        """Centralized validation, grouped by concern."""
        self._validate_retry_config()
        self._validate_timeouts()
        return self

    def _validate_retry_config(self) -> None:
        if self.RETRY_MAX_ATTEMPTS < 1:
            raise ValueError("RETRY_MAX_ATTEMPTS must be >= 1.")
        if self.RETRY_INITIAL_BACKOFF_SECONDS < 0:
            raise ValueError("RETRY_INITIAL_BACKOFF_SECONDS must be >= 0.")
        if self.RETRY_MAX_BACKOFF_SECONDS < self.RETRY_INITIAL_BACKOFF_SECONDS:
            raise ValueError(
                "RETRY_MAX_BACKOFF_SECONDS must be >= RETRY_INITIAL_BACKOFF_SECONDS."
            )
        if self.RETRY_BACKOFF_MULTIPLIER <= 1:
            raise ValueError("RETRY_BACKOFF_MULTIPLIER must be > 1.")

    def _validate_timeouts(self) -> None:
        if self.AWS_CONNECT_TIMEOUT_SECONDS <= 0 or self.AWS_READ_TIMEOUT_SECONDS <= 0:
            raise ValueError("AWS socket timeouts must be > 0.")
        if self.SAGEMAKER_MAX_PAGES <= 0:
            raise ValueError("SAGEMAKER_MAX_PAGES must be > 0.")
        if self.INVENTORY_TIMEOUT_SECONDS is not None and self.INVENTORY_TIMEOUT_SECONDS <= 0:
            raise ValueError("INVENTORY_TIMEOUT_SECONDS must be > 0 when set.")

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == ENV_PRODUCTION
