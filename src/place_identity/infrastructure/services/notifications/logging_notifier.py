"""Notifier used in development and test mode: logs instead of sending."""

import structlog

from place_identity.core.logging import mask_email, mask_token
from place_identity.domain.interfaces import INotifier
from place_identity.domain.value_objects.notification import Notification

logger = structlog.get_logger(__name__)


class LoggingNotifier(INotifier):
    async def send(self, notification: Notification) -> None:
        logger.info(
            "Email sent in test mode",
            kind=notification.kind.value,
            to_email=mask_email(notification.destination),
            subject=notification.subject,
            token=mask_token(notification.context.get("token", "")),
            html_length=len(notification.body),
        )
        # The full body carries a live link; only emitted at debug level.
        logger.debug("Email body", to_email=notification.destination, body=notification.body)
