"""Account Domain Events.

These events represent significant occurrences in the account lifecycle that
other parts of the system may react to (audit logging, security monitoring).
They are published after the corresponding change has been committed.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class BaseDomainEvent:
    """Base class for all domain events.

    Attributes:
        occurred_at: When the event occurred
        account_id: ID of the account the event is about, when known
        correlation_id: Optional request correlation ID for tracing
    """

    occurred_at: datetime
    account_id: Optional[str]
    correlation_id: Optional[str] = None

    def __post_init__(self):
        """Ensure occurred_at is timezone-aware."""
        if not self.occurred_at.tzinfo:
            object.__setattr__(self, "occurred_at", self.occurred_at.replace(tzinfo=timezone.utc))


@dataclass(frozen=True)
class AccountRegisteredEvent(BaseDomainEvent):
    """Emitted when a new account has been created."""

    email: str = ""


@dataclass(frozen=True)
class EmailConfirmedEvent(BaseDomainEvent):
    """Emitted when an account owner confirmed their email address."""

    email: str = ""


@dataclass(frozen=True)
class EmailChangedEvent(BaseDomainEvent):
    """Emitted when an account switched to a new email address.

    Attributes:
        old_email: Address before the change
        new_email: Address after the change
    """

    old_email: str = ""
    new_email: str = ""


@dataclass(frozen=True)
class LoginSucceededEvent(BaseDomainEvent):
    """Emitted on a successful login."""


@dataclass(frozen=True)
class LoginFailedEvent(BaseDomainEvent):
    """Emitted on every rejected login.

    Attributes:
        reason: ``unknown_email``, ``invalid_password``, ``locked_out`` or
            ``email_not_confirmed``
        failed_access_count: Counter value after this failure, when relevant
    """

    reason: str = ""
    failed_access_count: int = 0


@dataclass(frozen=True)
class AccountLockedOutEvent(BaseDomainEvent):
    """Emitted when a failure pushed an account over the lockout threshold."""

    lockout_end_utc: Optional[datetime] = None


@dataclass(frozen=True)
class PasswordResetRequestedEvent(BaseDomainEvent):
    """Emitted when a reset token was issued and queued for delivery."""

    token_expires_at: Optional[datetime] = None


@dataclass(frozen=True)
class PasswordResetCompletedEvent(BaseDomainEvent):
    """Emitted when a reset token was redeemed for a new password."""


@dataclass(frozen=True)
class PasswordChangedEvent(BaseDomainEvent):
    """Emitted when an authenticated owner changed their password."""
