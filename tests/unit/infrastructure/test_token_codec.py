"""Tests for the security token codec."""

from datetime import timedelta

import pytest

from place_identity.core.exceptions import InvalidOrExpiredTokenError, TokenFailure
from place_identity.domain.value_objects.security_token import TokenPurpose
from place_identity.infrastructure.services.token_codec import TokenCodec
from tests.factories.account import create_fake_account
from tests.utils.doubles import TEST_SECRET_KEY

TTL = timedelta(minutes=15)


def _failure(callable_, *args, **kwargs) -> TokenFailure:
    with pytest.raises(InvalidOrExpiredTokenError) as exc_info:
        callable_(*args, **kwargs)
    assert exc_info.value.code == "invalid_or_expired_token"
    return exc_info.value.reason


class TestTokenCodec:
    @pytest.fixture
    def account(self):
        return create_fake_account()

    def test_issue_then_validate(self, token_codec, account, clock):
        token = token_codec.issue(account, TokenPurpose.EMAIL_CONFIRMATION, TTL)
        claims = token_codec.validate(token, TokenPurpose.EMAIL_CONFIRMATION, account)
        assert claims.account_id == account.account_id
        assert claims.purpose is TokenPurpose.EMAIL_CONFIRMATION
        assert claims.security_stamp == account.security_stamp
        assert claims.expires_at == clock.now + TTL
        assert claims.new_email is None

    def test_token_is_url_safe(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.PASSWORD_RESET, TTL)
        assert all(ch.isalnum() or ch in "-_." for ch in token)

    def test_two_tokens_issued_together_differ(self, token_codec, account):
        first = token_codec.issue(account, TokenPurpose.PASSWORD_RESET, TTL)
        second = token_codec.issue(account, TokenPurpose.PASSWORD_RESET, TTL)
        assert first != second

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c", "....."])
    def test_malformed(self, token_codec, account, garbage):
        assert _failure(token_codec.validate, garbage, TokenPurpose.ACCESS, account) is TokenFailure.MALFORMED

    def test_foreign_signature_is_malformed(self, token_codec, account, clock):
        foreign = TokenCodec("another-secret-key-that-is-long-enough!", clock=clock)
        token = foreign.issue(account, TokenPurpose.ACCESS, TTL)
        assert _failure(token_codec.validate, token, TokenPurpose.ACCESS, account) is TokenFailure.MALFORMED

    def test_tampered_token_is_malformed(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.ACCESS, TTL)
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        assert _failure(token_codec.validate, tampered, TokenPurpose.ACCESS, account) is TokenFailure.MALFORMED

    def test_purpose_mismatch(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.EMAIL_CONFIRMATION, TTL)
        reason = _failure(token_codec.validate, token, TokenPurpose.PASSWORD_RESET, account)
        assert reason is TokenFailure.PURPOSE_MISMATCH

    def test_expired(self, token_codec, account, clock):
        token = token_codec.issue(account, TokenPurpose.PASSWORD_RESET, TTL)
        clock.advance(TTL)
        assert _failure(token_codec.validate, token, TokenPurpose.PASSWORD_RESET, account) is TokenFailure.EXPIRED

    def test_valid_until_just_before_expiry(self, token_codec, account, clock):
        token = token_codec.issue(account, TokenPurpose.PASSWORD_RESET, TTL)
        clock.advance(TTL - timedelta(seconds=1))
        token_codec.validate(token, TokenPurpose.PASSWORD_RESET, account)

    def test_zero_ttl_never_validates(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.PASSWORD_RESET, timedelta(0))
        assert _failure(token_codec.validate, token, TokenPurpose.PASSWORD_RESET, account) is TokenFailure.EXPIRED

    def test_purpose_is_checked_before_expiry(self, token_codec, account, clock):
        token = token_codec.issue(account, TokenPurpose.EMAIL_CONFIRMATION, TTL)
        clock.advance(TTL * 2)
        reason = _failure(token_codec.validate, token, TokenPurpose.PASSWORD_RESET, account)
        assert reason is TokenFailure.PURPOSE_MISMATCH

    def test_subject_mismatch(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.ACCESS, TTL)
        other = create_fake_account()
        assert _failure(token_codec.validate, token, TokenPurpose.ACCESS, other) is TokenFailure.SUBJECT_MISMATCH

    def test_stamp_rotation_revokes(self, token_codec, account, clock):
        token = token_codec.issue(account, TokenPurpose.REFRESH, TTL)
        rotated = account.change_password_hash("new-hash", clock.now)
        assert _failure(token_codec.validate, token, TokenPurpose.REFRESH, rotated) is TokenFailure.STAMP_MISMATCH

    def test_email_change_token_is_bound_to_new_address(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.EMAIL_CHANGE, TTL, new_email="New@Example.com")
        claims = token_codec.validate(token, TokenPurpose.EMAIL_CHANGE, account, new_email="new@example.com")
        assert claims.new_email == "new@example.com"

        reason = _failure(
            token_codec.validate, token, TokenPurpose.EMAIL_CHANGE, account, new_email="other@example.com"
        )
        assert reason is TokenFailure.CONTEXT_MISMATCH

    def test_email_change_token_requires_address(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.EMAIL_CHANGE, TTL, new_email="new@example.com")
        assert _failure(token_codec.validate, token, TokenPurpose.EMAIL_CHANGE, account) is TokenFailure.CONTEXT_MISMATCH

    def test_decode_does_not_check_account(self, token_codec, account):
        token = token_codec.issue(account, TokenPurpose.ACCESS, TTL)
        assert token_codec.decode(token, TokenPurpose.ACCESS).account_id == account.account_id

    def test_same_secret_different_instance_accepts(self, account, clock):
        issuer = TokenCodec(TEST_SECRET_KEY, clock=clock)
        verifier = TokenCodec(TEST_SECRET_KEY, clock=clock)
        token = issuer.issue(account, TokenPurpose.ACCESS, TTL)
        verifier.validate(token, TokenPurpose.ACCESS, account)
