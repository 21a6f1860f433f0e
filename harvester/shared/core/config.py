from functools import lru_cache
from threading import Lock
from typing import Optional
import re
import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr, model_validator

# Environment Constants
ENV_PRODUCTION = "production"
ENV_STAGING = "staging"
ENV_DEVELOPMENT = "development"

PROJECT_ID_PATTERN = re.compile(r"^[a-z][a-z0-9\-]{4,28}[a-z0-9]$")


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
    Main configuration for the inventory harvester.
    Uses Pydantic-Settings for environment variable parsing from .env.
    """

    APP_NAME: str = "Harvester"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    # ENVIRONMENT options: local, development, staging, production
    ENVIRONMENT: str = ENV_DEVELOPMENT
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"

    # GCP target project and credentials (Application Default Credentials when unset)
    GCP_PROJECT_ID: Optional[str] = None
    GCP_SERVICE_ACCOUNT_JSON: Optional[SecretStr] = None

    # Discovery scheduling
    # Empty list means every registered discovery plugin participates.
    DISCOVERY_ENABLED_SERVICES: list[str] = []
    # 1 runs plugins sequentially; larger values fan out onto worker threads.
    DISCOVERY_MAX_CONCURRENCY: int = 4

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    @model_validator(mode="after")
    def validate_all_config(self) -> "Settings":
        """Centralized validation orchestrator."""
        if self.TESTING and self.ENVIRONMENT in {ENV_PRODUCTION, ENV_STAGING}:
            raise ValueError(
                "TESTING must be false in staging/production runtime environments."
            )
        self._validate_discovery_config()
        self._validate_gcp_config()
        return self

    def _validate_discovery_config(self) -> None:
        if self.DISCOVERY_MAX_CONCURRENCY < 1:
            raise ValueError("DISCOVERY_MAX_CONCURRENCY must be at least 1.")
        self.DISCOVERY_ENABLED_SERVICES = [
            s.strip() for s in self.DISCOVERY_ENABLED_SERVICES if s and s.strip()
        ]

    def _validate_gcp_config(self) -> None:
        if self.GCP_PROJECT_ID and not PROJECT_ID_PATTERN.match(self.GCP_PROJECT_ID):
            raise ValueError(
                f"GCP_PROJECT_ID '{self.GCP_PROJECT_ID}' is not a valid project id. "
                "Must be 6-30 lowercase letters, digits, or hyphens."
            )

    @property
    def is_production(self) -> bool:
        """True only when ENVIRONMENT is explicitly set to 'production'."""
        return self.ENVIRONMENT == ENV_PRODUCTION
