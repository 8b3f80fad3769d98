"""Notification value objects.

An ``OutboundMessage`` is what the lifecycle asks to be sent; the dispatcher
renders it into a ``Notification`` and hands that to the notifier.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class NotificationKind(str, Enum):
    EMAIL_CONFIRMATION = "email_confirmation"
    EMAIL_CHANGE = "email_change"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """A notification request raised after a credential change committed.

    Attributes:
        kind: Selects the template and subject.
        destination: Email address the message goes to.
        context: Template variables (``account_id``, ``token`` and, for email
            changes, ``new_email``).
    """

    kind: NotificationKind
    destination: str
    context: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Notification:
    """A rendered message ready for delivery."""

    kind: NotificationKind
    destination: str
    subject: str
    body: str
    context: Dict[str, str] = field(default_factory=dict)
