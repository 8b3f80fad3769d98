"""Security token codec.

Tokens are compact JWS strings (HS256 by default) signed with ``SECRET_KEY``.
They are stateless: the claims carry everything needed to validate them, and
the embedded security stamp ties each token to the credential state of the
account at issue time. Rotating the account's stamp therefore revokes every
token issued before the rotation.

Claims:

- ``sub``: account id
- ``pur``: ``TokenPurpose`` value
- ``stm``: security stamp at issue time
- ``iat`` / ``exp``: issue and expiry instants (seconds since the epoch)
- ``jti``: random id, so two tokens issued in the same second differ
- ``nem``: normalized target address (email-change tokens only)

The compact serialization is base64url, so tokens can travel in URL query
parameters without further escaping.
"""

import hmac
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import structlog
from jose import JWTError, jwt

from place_identity.core.exceptions import InvalidOrExpiredTokenError, TokenFailure
from place_identity.domain.entities.account import Account, utc_now
from place_identity.domain.interfaces import ITokenCodec
from place_identity.domain.value_objects.email import normalize_email
from place_identity.domain.value_objects.security_token import TokenClaims, TokenPurpose

logger = structlog.get_logger(__name__)

# Expiry is checked explicitly so the failure reason can be reported.
_DECODE_OPTIONS = {
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
}


class TokenCodec(ITokenCodec):
    """Issues and validates purpose-bound, time-limited, stamp-bound tokens.

    Validation checks run in a fixed order and stop at the first failure:
    signature and structure, purpose, expiry, subject, email-change target,
    security stamp.

    Args:
        secret_key: HMAC signing key.
        algorithm: JWS algorithm understood by python-jose.
        clock: Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock

    def issue(
        self,
        account: Account,
        purpose: TokenPurpose,
        ttl: timedelta,
        new_email: Optional[str] = None,
    ) -> str:
        now = self._clock()
        claims: Dict[str, Any] = {
            "sub": account.account_id,
            "pur": purpose.value,
            "stm": account.security_stamp,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        if new_email is not None:
            claims["nem"] = normalize_email(new_email)
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        try:
            payload = jwt.decode(
                token, self._secret_key, algorithms=[self._algorithm], options=_DECODE_OPTIONS
            )
        except (JWTError, AttributeError, TypeError):
            self._reject(TokenFailure.MALFORMED, purpose)

        try:
            account_id = str(payload["sub"])
            token_purpose = str(payload["pur"])
            security_stamp = str(payload["stm"])
            issued_at = int(payload["iat"])
            expires_at = int(payload["exp"])
            token_id = str(payload["jti"])
        except (KeyError, TypeError, ValueError):
            self._reject(TokenFailure.MALFORMED, purpose)

        if token_purpose != purpose.value:
            self._reject(TokenFailure.PURPOSE_MISMATCH, purpose)

        if self._clock().timestamp() >= expires_at:
            self._reject(TokenFailure.EXPIRED, purpose, account_id)

        return TokenClaims(
            account_id=account_id,
            purpose=purpose,
            security_stamp=security_stamp,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
            token_id=token_id,
            new_email=payload.get("nem"),
        )

    def validate(
        self,
        token: str,
        purpose: TokenPurpose,
        account: Account,
        new_email: Optional[str] = None,
    ) -> TokenClaims:
        claims = self.decode(token, purpose)

        if claims.account_id != account.account_id:
            self._reject(TokenFailure.SUBJECT_MISMATCH, purpose, account.account_id)

        expected_email = normalize_email(new_email) if new_email is not None else None
        if claims.new_email != expected_email:
            self._reject(TokenFailure.CONTEXT_MISMATCH, purpose, account.account_id)

        if not hmac.compare_digest(claims.security_stamp, account.security_stamp):
            self._reject(TokenFailure.STAMP_MISMATCH, purpose, account.account_id)

        return claims

    def _reject(
        self, reason: TokenFailure, purpose: TokenPurpose, account_id: Optional[str] = None
    ):
        logger.info(
            "Security token rejected",
            reason=reason.value,
            purpose=purpose.value,
            account_id=account_id,
        )
        raise InvalidOrExpiredTokenError(reason)
