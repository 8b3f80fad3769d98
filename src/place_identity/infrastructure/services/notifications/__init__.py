"""Notification composition, dispatch and delivery adapters."""

from .email_notifier import EmailNotifier
from .logging_notifier import LoggingNotifier
from .notification_composer import NotificationComposer
from .notification_dispatcher import NotificationDispatcher, drain_pending_notifications

__all__ = [
    "EmailNotifier",
    "LoggingNotifier",
    "NotificationComposer",
    "NotificationDispatcher",
    "drain_pending_notifications",
]
