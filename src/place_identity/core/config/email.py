"""Email configuration settings.

This module defines the SMTP connection used to deliver confirmation,
email-change and password-reset messages, plus the frontend links embedded
in those messages.
"""

from typing import Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults and validation.

    Attributes:
        SMTP_HOST: SMTP server hostname
        SMTP_PORT: SMTP server port (587 for STARTTLS, 465 for SSL)
        SMTP_USERNAME: SMTP authentication username
        SMTP_PASSWORD: SMTP authentication password (SecretStr)
        SMTP_USE_TLS: Upgrade the connection with STARTTLS
        SMTP_USE_SSL: Connect over implicit TLS
        FROM_EMAIL: Default sender email address
        FROM_NAME: Default sender name
        EMAIL_TEMPLATES_DIR: Directory of Jinja2 templates, empty for the bundled ones
        EMAIL_CONFIRMATION_URL_BASE: Link target for confirmation and email-change messages
        EMAIL_TEST_MODE: Log messages instead of sending them
    """

    SMTP_HOST: str = Field(default="localhost", description="SMTP server hostname")
    SMTP_PORT: int = Field(default=587, ge=1, le=65535)
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[SecretStr] = None
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False

    FROM_EMAIL: EmailStr = "noreply@example.com"
    FROM_NAME: str = "Place Identity"

    EMAIL_TEMPLATES_DIR: str = Field(
        default="",
        description="Directory containing email templates; empty uses the bundled templates",
    )
    EMAIL_CONFIRMATION_URL_BASE: str = Field(
        default="http://localhost:8000/api/v1/auth/confirm-email",
        description="Base URL for confirmation links",
    )

    EMAIL_TEST_MODE: bool = Field(
        default=False, description="Enable test mode (emails logged instead of sent)"
    )

    def validate_smtp_config(self) -> None:
        """Validate SMTP configuration for production use.

        Raises:
            ValueError: If SMTP configuration is invalid or insecure
        """
        if self.EMAIL_TEST_MODE or getattr(self, "APP_ENV", "development") not in {
            "production",
            "staging",
        }:
            return

        if not self.SMTP_USERNAME or not self.SMTP_PASSWORD:
            raise ValueError("SMTP_USERNAME and SMTP_PASSWORD are required in production")

        if not (self.SMTP_USE_TLS or self.SMTP_USE_SSL):
            raise ValueError("Either SMTP_USE_TLS or SMTP_USE_SSL must be enabled for security")

        if self.SMTP_USE_TLS and self.SMTP_USE_SSL:
            raise ValueError("Cannot enable both SMTP_USE_TLS and SMTP_USE_SSL simultaneously")
