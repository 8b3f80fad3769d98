"""Tests for the authentication HTTP endpoints."""

import pytest

from place_identity.core.exceptions import INVALID_CREDENTIALS_MESSAGE, INVALID_TOKEN_MESSAGE
from place_identity.domain.value_objects.notification import NotificationKind
from place_identity.infrastructure.services.notifications import drain_pending_notifications
from tests.utils.doubles import OTHER_STRONG_PASSWORD, STRONG_PASSWORD
from tests.utils.http import API, bearer, follow_link, login, register_and_confirm

EMAIL = "jane.doe@example.com"


class TestRegisterEndpoint:
    @pytest.mark.asyncio
    async def test_register(self, async_client, recording_notifier):
        response = await async_client.post(
            f"{API}/auth/register", json={"email": EMAIL, "password": STRONG_PASSWORD}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == EMAIL
        assert body["email_confirmed"] is False
        assert "password" not in str(body)

        await drain_pending_notifications()
        sent = recording_notifier.last(NotificationKind.EMAIL_CONFIRMATION)
        assert sent.destination == EMAIL
        assert f"userId={body['account_id']}" in sent.context["link"]

    @pytest.mark.asyncio
    async def test_weak_password(self, async_client):
        response = await async_client.post(
            f"{API}/auth/register", json={"email": EMAIL, "password": "password"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "weak_password"
        assert "password_requires_digit" in body["errors"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, async_client):
        payload = {"email": EMAIL, "password": STRONG_PASSWORD}
        await async_client.post(f"{API}/auth/register", json=payload)
        response = await async_client.post(
            f"{API}/auth/register", json={**payload, "email": EMAIL.upper()}
        )
        assert response.status_code == 409
        assert response.json()["code"] == "email_in_use"


class TestConfirmEmailEndpoint:
    @pytest.mark.asyncio
    async def test_link_confirms_once(self, async_client, recording_notifier):
        await async_client.post(f"{API}/auth/register", json={"email": EMAIL, "password": STRONG_PASSWORD})

        first = await follow_link(async_client, recording_notifier)
        assert first.status_code == 200

        replay = await follow_link(async_client, recording_notifier)
        assert replay.status_code == 401
        assert replay.json() == {"detail": INVALID_TOKEN_MESSAGE, "code": "invalid_or_expired_token"}

    @pytest.mark.asyncio
    async def test_unknown_account(self, async_client):
        response = await async_client.get(
            f"{API}/auth/confirm-email", params={"userId": "missing", "code": "whatever"}
        )
        assert response.status_code == 404
        assert response.json()["code"] == "account_not_found"

    @pytest.mark.asyncio
    async def test_missing_code(self, async_client):
        response = await async_client.get(f"{API}/auth/confirm-email", params={"userId": "x"})
        assert response.status_code == 422


class TestLoginEndpoint:
    @pytest.mark.asyncio
    async def test_login_returns_tokens(self, async_client, recording_notifier):
        await register_and_confirm(async_client, recording_notifier, EMAIL)

        response = await login(async_client, EMAIL)

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["refresh_token"]
        assert body["expires_in"] > 0

    @pytest.mark.asyncio
    async def test_unknown_email_wrong_password_and_lockout_are_indistinguishable(
        self, async_client, recording_notifier
    ):
        await register_and_confirm(async_client, recording_notifier, EMAIL)

        unknown = await login(async_client, "nobody@example.com")
        malformed = await login(async_client, "not-an-email")
        wrong = [await login(async_client, EMAIL, OTHER_STRONG_PASSWORD) for _ in range(3)]
        locked = await login(async_client, EMAIL)

        expected = {"detail": INVALID_CREDENTIALS_MESSAGE, "code": "invalid_credentials"}
        for response in [unknown, malformed, *wrong, locked]:
            assert response.status_code == 401
            assert response.json() == expected
            assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_unconfirmed_email(self, async_client):
        await async_client.post(f"{API}/auth/register", json={"email": EMAIL, "password": STRONG_PASSWORD})
        response = await login(async_client, EMAIL)
        assert response.status_code == 401
        assert response.json()["code"] == "email_not_confirmed"


class TestSessionEndpoints:
    @pytest.mark.asyncio
    async def test_refresh(self, async_client, recording_notifier):
        await register_and_confirm(async_client, recording_notifier, EMAIL)
        tokens = (await login(async_client, EMAIL)).json()

        response = await async_client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200
        assert response.json()["access_token"]

    @pytest.mark.asyncio
    async def test_refresh_rejects_access_token(self, async_client, recording_notifier):
        await register_and_confirm(async_client, recording_notifier, EMAIL)
        tokens = (await login(async_client, EMAIL)).json()

        response = await async_client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_manage_info_requires_bearer(self, async_client):
        response = await async_client.get(f"{API}/auth/manage/info")
        assert response.status_code == 401
        assert response.json()["code"] == "not_authenticated"

        response = await async_client.get(f"{API}/auth/manage/info", headers=bearer("garbage"))
        assert response.status_code == 401
        assert response.json()["code"] == "invalid_or_expired_token"

    @pytest.mark.asyncio
    async def test_manage_info(self, async_client, recording_notifier):
        registered = await register_and_confirm(async_client, recording_notifier, EMAIL)
        tokens = (await login(async_client, EMAIL)).json()

        response = await async_client.get(
            f"{API}/auth/manage/info", headers=bearer(tokens["access_token"])
        )
        assert response.status_code == 200
        assert response.json() == {
            "account_id": registered["account_id"],
            "email": EMAIL,
            "email_confirmed": True,
            "is_locked_out": False,
            "lockout_end_utc": None,
        }

    @pytest.mark.asyncio
    async def test_new_password_requires_old_password(self, async_client, recording_notifier):
        await register_and_confirm(async_client, recording_notifier, EMAIL)
        tokens = (await login(async_client, EMAIL)).json()

        response = await async_client.post(
            f"{API}/auth/manage/info",
            json={"new_password": OTHER_STRONG_PASSWORD},
            headers=bearer(tokens["access_token"]),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "old_password_required"

    @pytest.mark.asyncio
    async def test_wrong_old_password(self, async_client, recording_notifier):
        await register_and_confirm(async_client, recording_notifier, EMAIL)
        tokens = (await login(async_client, EMAIL)).json()

        response = await async_client.post(
            f"{API}/auth/manage/info",
            json={"new_password": OTHER_STRONG_PASSWORD, "old_password": "Wr0ng!Password"},
            headers=bearer(tokens["access_token"]),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_old_password"


class TestRecoveryEndpoints:
    @pytest.mark.asyncio
    async def test_uniform_responses(self, async_client, recording_notifier):
        await register_and_confirm(async_client, recording_notifier, EMAIL)

        for path in ("resend-confirmation", "forgot-password"):
            known = await async_client.post(f"{API}/auth/{path}", json={"email": EMAIL})
            unknown = await async_client.post(f"{API}/auth/{path}", json={"email": "nobody@example.com"})
            assert known.status_code == unknown.status_code == 200
            assert known.json() == unknown.json()

    @pytest.mark.asyncio
    async def test_reset_password(self, async_client, recording_notifier):
        await register_and_confirm(async_client, recording_notifier, EMAIL)
        await async_client.post(f"{API}/auth/forgot-password", json={"email": EMAIL})
        await drain_pending_notifications()
        code = recording_notifier.last(NotificationKind.PASSWORD_RESET).context["token"]

        response = await async_client.post(
            f"{API}/auth/reset-password",
            json={"email": EMAIL, "reset_code": code, "new_password": OTHER_STRONG_PASSWORD},
        )
        assert response.status_code == 200

        assert (await login(async_client, EMAIL)).status_code == 401
        assert (await login(async_client, EMAIL, OTHER_STRONG_PASSWORD)).status_code == 200

    @pytest.mark.asyncio
    async def test_reset_with_bad_code(self, async_client):
        response = await async_client.post(
            f"{API}/auth/reset-password",
            json={"email": EMAIL, "reset_code": "nope", "new_password": OTHER_STRONG_PASSWORD},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == INVALID_TOKEN_MESSAGE


class TestHealthAndMiddleware:
    @pytest.mark.asyncio
    async def test_health(self, async_client):
        response = await async_client.get(f"{API}/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["env"] == "test"

    @pytest.mark.asyncio
    async def test_correlation_id_is_echoed(self, async_client):
        response = await async_client.get(f"{API}/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_correlation_id_is_generated(self, async_client):
        response = await async_client.get(f"{API}/health")
        assert response.headers["X-Correlation-ID"]
