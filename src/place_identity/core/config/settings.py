"""Main application settings and configuration management.

This module composes the settings mixins (app, database, auth, email) into a
single ``Settings`` class, loads values from environment variables and .env
files, and exposes the ``settings`` singleton used throughout the service.

Environment Support:
- Development: Uses .env, email test mode on
- Test: Uses .env.test, email test mode on
- Staging/Production: Uses .env.staging/.env.production, SMTP and a real
  SECRET_KEY required
"""

import logging
import os
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import DEFAULT_SECRET_KEY, AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

ENV_FILES = {
    "development": ".env",
    "test": ".env.test",
    "staging": ".env.staging",
    "production": ".env.production",
}


class Settings(AppSettings, DatabaseSettings, AuthSettings, EmailSettings):
    """The main settings class that aggregates all service configuration.

    Security Note:
        - SECRET_KEY and SMTP_PASSWORD are never logged.
        - Staging and production refuse the development SECRET_KEY.
    Usage:
        - Access settings via the singleton instance ``settings``.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @model_validator(mode="after")
    def _apply_environment_defaults(self) -> "Settings":
        if self.APP_ENV in ("development", "test"):
            self.EMAIL_TEST_MODE = True
        elif self.SECRET_KEY == DEFAULT_SECRET_KEY:
            raise ValueError(f"SECRET_KEY must be set explicitly in the {self.APP_ENV} environment")
        if self.APP_ENV == "development":
            self.DEBUG = True
        return self


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")
    env_file = ENV_FILES.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        settings_instance = Settings(_env_file=env_file)
    else:
        settings_instance = Settings()

    settings_instance.validate_smtp_config()
    logger.info(
        "Application configured for %s (credential store: %s, email test mode: %s)",
        settings_instance.APP_ENV,
        settings_instance.CREDENTIAL_STORE,
        settings_instance.EMAIL_TEST_MODE,
    )
    return settings_instance


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
