"""SMTP delivery of notifications through fastapi-mail."""

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from place_identity.core.config.email import EmailSettings
from place_identity.core.exceptions import NotificationError
from place_identity.core.logging import mask_email
from place_identity.domain.interfaces import INotifier
from place_identity.domain.value_objects.notification import Notification

logger = structlog.get_logger(__name__)


class EmailNotifier(INotifier):
    """Sends rendered notifications as HTML email.

    Args:
        settings: SMTP connection and sender settings.

    Raises:
        NotificationError: If the SMTP configuration is rejected.
    """

    def __init__(self, settings: EmailSettings):
        try:
            config = ConnectionConfig(
                MAIL_USERNAME=settings.SMTP_USERNAME or "",
                MAIL_PASSWORD=settings.SMTP_PASSWORD.get_secret_value() if settings.SMTP_PASSWORD else "",
                MAIL_FROM=settings.FROM_EMAIL,
                MAIL_PORT=settings.SMTP_PORT,
                MAIL_SERVER=settings.SMTP_HOST,
                MAIL_FROM_NAME=settings.FROM_NAME,
                MAIL_STARTTLS=settings.SMTP_USE_TLS,
                MAIL_SSL_TLS=settings.SMTP_USE_SSL,
                USE_CREDENTIALS=bool(settings.SMTP_USERNAME and settings.SMTP_PASSWORD),
                VALIDATE_CERTS=True,
            )
        except ValueError as e:
            logger.error("Failed to configure FastMail", error=str(e))
            raise NotificationError(f"Failed to configure email service: {e}") from e

        self._fastmail = FastMail(config)
        logger.info("Email notifier configured", smtp_host=settings.SMTP_HOST)

    async def send(self, notification: Notification) -> None:
        message = MessageSchema(
            subject=notification.subject,
            recipients=[notification.destination],
            body=notification.body,
            subtype=MessageType.html,
        )
        try:
            await self._fastmail.send_message(message)
        except Exception as e:
            raise NotificationError(f"Failed to send email: {e}") from e

        logger.info(
            "Email sent",
            to_email=mask_email(notification.destination),
            subject=notification.subject,
        )
