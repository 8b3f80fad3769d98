"""Event Publisher Infrastructure Service.

Concrete implementation of the domain event publishing interface, enabling
the domain layer to publish events without coupling to infrastructure.
"""

from typing import Awaitable, Callable, List

import structlog

from place_identity.domain.events.account_events import BaseDomainEvent
from place_identity.domain.interfaces import IEventPublisher

logger = structlog.get_logger(__name__)

Subscriber = Callable[[BaseDomainEvent], Awaitable[None]]


class InMemoryEventPublisher(IEventPublisher):
    """In-memory event publisher.

    Events are kept for inspection and forwarded to registered subscribers.
    A production deployment can swap this for a broker-backed publisher.
    """

    def __init__(self):
        self._published_events: List[BaseDomainEvent] = []
        self._subscribers: List[Subscriber] = []

    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a single domain event.

        Failures are logged and swallowed so that an audit subscriber can
        never fail a credential operation that already committed.
        """
        event_type = type(event).__name__
        try:
            self._published_events.append(event)
            for subscriber in self._subscribers:
                await subscriber(event)

            logger.info(
                "Domain event published",
                event_type=event_type,
                account_id=event.account_id,
                correlation_id=event.correlation_id,
                occurred_at=event.occurred_at.isoformat(),
            )
        except Exception as e:
            logger.error("Failed to publish domain event", event_type=event_type, error=str(e))

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def get_published_events(self) -> List[BaseDomainEvent]:
        return list(self._published_events)
