"""Fire-and-forget notification delivery.

The lifecycle service enqueues a message once the credential change it
announces has been stored. Rendering and delivery then run in a background
task; the command that triggered them never waits for, or fails because of,
the notifier.
"""

import asyncio
from typing import Optional, Set

import structlog

from place_identity.core.logging import mask_email
from place_identity.domain.interfaces import INotificationDispatcher, INotifier
from place_identity.domain.value_objects.notification import OutboundMessage
from place_identity.infrastructure.services.notifications.notification_composer import (
    NotificationComposer,
)

logger = structlog.get_logger(__name__)

# Strong references keep in-flight deliveries alive until they finish.
_pending_deliveries: Set["asyncio.Task[None]"] = set()


class NotificationDispatcher(INotificationDispatcher):
    def __init__(self, notifier: INotifier, composer: NotificationComposer):
        self._notifier = notifier
        self._composer = composer

    def enqueue(self, message: OutboundMessage) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(message))
        _pending_deliveries.add(task)
        task.add_done_callback(_pending_deliveries.discard)

    async def _deliver(self, message: OutboundMessage) -> None:
        try:
            notification = self._composer.render(message)
            await self._notifier.send(notification)
        except Exception as e:
            logger.error(
                "Notification delivery failed",
                kind=message.kind.value,
                destination=mask_email(message.destination),
                error_type=type(e).__name__,
                error=str(e),
            )
            return
        logger.info(
            "Notification delivered",
            kind=message.kind.value,
            destination=mask_email(message.destination),
        )


def pending_notification_count() -> int:
    return len(_pending_deliveries)


async def drain_pending_notifications(timeout: Optional[float] = None) -> None:
    """Wait for in-flight deliveries, e.g. on shutdown or at the end of a test."""
    loop = asyncio.get_running_loop()
    tasks = {task for task in _pending_deliveries if task.get_loop() is loop}
    if tasks:
        await asyncio.wait(tasks, timeout=timeout)
