"""Dependency injection for the authentication services.

Stateless collaborators (codec, hasher, composer, notifier, publisher) are
process-wide singletons; the ``AccountLifecycle`` itself is assembled per
request from them. Tests swap collaborators through
``app.dependency_overrides``, typically ``get_credential_store`` and
``get_notifier``.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from place_identity.core.config.settings import settings
from place_identity.domain.interfaces import (
    ICredentialStore,
    IEventPublisher,
    INotificationDispatcher,
    INotifier,
    IPasswordHasher,
    ISessionTokenService,
    ITokenCodec,
)
from place_identity.domain.services.authentication.account_lifecycle import (
    AccountLifecycle,
    LifecycleOptions,
)
from place_identity.domain.services.authentication.lockout_policy import LockoutPolicy
from place_identity.domain.value_objects.password_policy import PasswordPolicy
from place_identity.infrastructure.database.async_db import get_session_factory
from place_identity.infrastructure.repositories import (
    InMemoryAccountRepository,
    SqlAccountRepository,
)
from place_identity.infrastructure.services.event_publisher import InMemoryEventPublisher
from place_identity.infrastructure.services.notifications import (
    EmailNotifier,
    LoggingNotifier,
    NotificationComposer,
    NotificationDispatcher,
)
from place_identity.infrastructure.services.password_hasher import BcryptPasswordHasher
from place_identity.infrastructure.services.session_token_service import SessionTokenService
from place_identity.infrastructure.services.token_codec import TokenCodec


@lru_cache(maxsize=1)
def get_in_memory_store() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


def get_credential_store() -> ICredentialStore:
    """Selects the store named by ``CREDENTIAL_STORE``."""
    if settings.CREDENTIAL_STORE == "memory":
        return get_in_memory_store()
    return SqlAccountRepository(get_session_factory())


@lru_cache(maxsize=1)
def get_password_hasher() -> IPasswordHasher:
    return BcryptPasswordHasher(rounds=settings.BCRYPT_WORK_FACTOR)


@lru_cache(maxsize=1)
def get_token_codec() -> ITokenCodec:
    return TokenCodec(settings.SECRET_KEY, algorithm=settings.TOKEN_ALGORITHM)


@lru_cache(maxsize=1)
def get_session_token_service() -> ISessionTokenService:
    return SessionTokenService(
        get_token_codec(),
        access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


@lru_cache(maxsize=1)
def get_event_publisher() -> IEventPublisher:
    return InMemoryEventPublisher()


@lru_cache(maxsize=1)
def get_notification_composer() -> NotificationComposer:
    return NotificationComposer(
        confirmation_url_base=settings.EMAIL_CONFIRMATION_URL_BASE,
        project_name=settings.PROJECT_NAME,
        templates_dir=settings.EMAIL_TEMPLATES_DIR or None,
    )


@lru_cache(maxsize=1)
def get_notifier() -> INotifier:
    """Logs messages in test mode, sends them over SMTP otherwise."""
    if settings.EMAIL_TEST_MODE:
        return LoggingNotifier()
    return EmailNotifier(settings)


def get_notification_dispatcher(
    notifier: Annotated[INotifier, Depends(get_notifier)],
    composer: Annotated[NotificationComposer, Depends(get_notification_composer)],
) -> INotificationDispatcher:
    return NotificationDispatcher(notifier, composer)


def get_account_lifecycle(
    store: Annotated[ICredentialStore, Depends(get_credential_store)],
    password_hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    token_codec: Annotated[ITokenCodec, Depends(get_token_codec)],
    session_tokens: Annotated[ISessionTokenService, Depends(get_session_token_service)],
    notifications: Annotated[INotificationDispatcher, Depends(get_notification_dispatcher)],
    event_publisher: Annotated[IEventPublisher, Depends(get_event_publisher)],
) -> AccountLifecycle:
    return AccountLifecycle(
        store=store,
        password_hasher=password_hasher,
        token_codec=token_codec,
        session_tokens=session_tokens,
        notifications=notifications,
        event_publisher=event_publisher,
        password_policy=PasswordPolicy.from_settings(settings),
        lockout_policy=LockoutPolicy.from_settings(settings),
        options=LifecycleOptions.from_settings(settings),
    )


AccountLifecycleDep = Annotated[AccountLifecycle, Depends(get_account_lifecycle)]
