"""Domain interfaces (ports) implemented by the infrastructure layer."""

from .repositories import ICredentialStore
from .services import (
    IEventPublisher,
    INotificationDispatcher,
    INotifier,
    IPasswordHasher,
    ISessionTokenService,
    ITokenCodec,
)

__all__ = [
    "ICredentialStore",
    "IEventPublisher",
    "INotificationDispatcher",
    "INotifier",
    "IPasswordHasher",
    "ISessionTokenService",
    "ITokenCodec",
]
