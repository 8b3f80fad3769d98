"""Session tokens returned by login and refresh.

Access and refresh tokens are issued by the same codec as the email and
reset tokens, under their own purposes. Being stamp-bound, every session of
an account ends as soon as its password or email changes.
"""

from datetime import timedelta

from place_identity.domain.entities.account import Account
from place_identity.domain.interfaces import ISessionTokenService, ITokenCodec
from place_identity.domain.value_objects.security_token import SessionTokens, TokenPurpose


class SessionTokenService(ISessionTokenService):
    def __init__(self, codec: ITokenCodec, access_ttl: timedelta, refresh_ttl: timedelta):
        self._codec = codec
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl

    def issue(self, account: Account) -> SessionTokens:
        return SessionTokens(
            access_token=self._codec.issue(account, TokenPurpose.ACCESS, self._access_ttl),
            refresh_token=self._codec.issue(account, TokenPurpose.REFRESH, self._refresh_ttl),
            expires_in=int(self._access_ttl.total_seconds()),
        )
