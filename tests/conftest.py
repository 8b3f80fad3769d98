"""Shared fixtures for the place-identity test suite.

The environment is pinned before the application package is imported: the
settings singleton is built at import time.
"""

import os

os.environ["APP_ENV"] = "test"
os.environ["CREDENTIAL_STORE"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["EMAIL_TEST_MODE"] = "true"
os.environ["LOG_JSON"] = "false"

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from place_identity.domain.services.authentication import (
    AccountLifecycle,
    LifecycleOptions,
    LockoutPolicy,
)
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    get_credential_store,
    get_notifier,
)
from place_identity.infrastructure.repositories import InMemoryAccountRepository
from place_identity.infrastructure.services.event_publisher import InMemoryEventPublisher
from place_identity.infrastructure.services.notifications import drain_pending_notifications
from place_identity.infrastructure.services.password_hasher import BcryptPasswordHasher
from place_identity.infrastructure.services.session_token_service import SessionTokenService
from place_identity.infrastructure.services.token_codec import TokenCodec
from place_identity.main import app
from tests.utils.doubles import (
    TEST_SECRET_KEY,
    FakeClock,
    RecordingDispatcher,
    RecordingNotifier,
)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryAccountRepository()


@pytest.fixture(scope="session")
def password_hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_codec(clock):
    return TokenCodec(TEST_SECRET_KEY, clock=clock)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def event_publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def lifecycle_factory(store, password_hasher, token_codec, dispatcher, event_publisher, clock):
    """Build an ``AccountLifecycle`` over the test doubles, with overridable parts."""

    def build(**overrides) -> AccountLifecycle:
        parts = dict(
            store=store,
            password_hasher=password_hasher,
            token_codec=token_codec,
            session_tokens=SessionTokenService(
                token_codec, access_ttl=timedelta(minutes=15), refresh_ttl=timedelta(days=7)
            ),
            notifications=dispatcher,
            event_publisher=event_publisher,
            lockout_policy=LockoutPolicy(),
            options=LifecycleOptions(),
            clock=clock,
        )
        parts.update(overrides)
        return AccountLifecycle(**parts)

    return build


@pytest.fixture
def lifecycle(lifecycle_factory):
    return lifecycle_factory()


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def async_client(store, recording_notifier):
    """HTTP client against the application with a fresh store and a recording notifier."""
    app.dependency_overrides[get_credential_store] = lambda: store
    app.dependency_overrides[get_notifier] = lambda: recording_notifier
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await drain_pending_notifications(timeout=5)
    app.dependency_overrides.clear()
