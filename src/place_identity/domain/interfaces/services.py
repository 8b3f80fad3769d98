"""Service interfaces the domain layer depends on.

Each interface is a port; infrastructure provides the adapters and the
dependency-injection module wires them into ``AccountLifecycle``.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional

from place_identity.domain.entities.account import Account
from place_identity.domain.events.account_events import BaseDomainEvent
from place_identity.domain.value_objects.notification import Notification, OutboundMessage
from place_identity.domain.value_objects.security_token import (
    SessionTokens,
    TokenClaims,
    TokenPurpose,
)


class IPasswordHasher(ABC):
    """One-way password hashing. Implementations are synchronous and CPU bound;
    callers run them in a worker thread."""

    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, password_hash: str, password: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def verify_against_dummy(self, password: str) -> bool:
        """Spend one verification on a throwaway hash.

        Used when the account does not exist so that the response time does
        not reveal it. Always returns ``False``.
        """
        raise NotImplementedError


class ITokenCodec(ABC):
    """Issues and validates purpose-bound, time-limited, stamp-bound tokens."""

    @abstractmethod
    def issue(
        self,
        account: Account,
        purpose: TokenPurpose,
        ttl: timedelta,
        new_email: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        """Check signature, purpose and expiry without consulting an account.

        Raises:
            InvalidOrExpiredTokenError: With reason ``MALFORMED``,
                ``PURPOSE_MISMATCH`` or ``EXPIRED``.
        """
        raise NotImplementedError

    @abstractmethod
    def validate(
        self,
        token: str,
        purpose: TokenPurpose,
        account: Account,
        new_email: Optional[str] = None,
    ) -> TokenClaims:
        """Fully validate ``token`` against ``account``.

        Raises:
            InvalidOrExpiredTokenError: For any failed check.
        """
        raise NotImplementedError


class ISessionTokenService(ABC):
    """Issues the bearer tokens returned by login and refresh."""

    @abstractmethod
    def issue(self, account: Account) -> SessionTokens:
        raise NotImplementedError


class INotifier(ABC):
    """Delivers a rendered notification to its destination."""

    @abstractmethod
    async def send(self, notification: Notification) -> None:
        raise NotImplementedError


class INotificationDispatcher(ABC):
    """Queues notifications for delivery without making the caller wait."""

    @abstractmethod
    def enqueue(self, message: OutboundMessage) -> None:
        raise NotImplementedError


class IEventPublisher(ABC):
    """Publishes domain events. Publishing failures never fail the command."""

    @abstractmethod
    async def publish(self, event: BaseDomainEvent) -> None:
        raise NotImplementedError
