"""Security token value objects.

Tokens are never stored. Everything needed to validate one travels inside
its signed claims; see ``place_identity.infrastructure.services.token_codec``.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TokenPurpose(str, Enum):
    """What a token authorizes. A token is only accepted for its own purpose."""

    EMAIL_CONFIRMATION = "email_confirmation"
    EMAIL_CHANGE = "email_change"
    PASSWORD_RESET = "password_reset"
    # Session tokens returned by login
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Decoded claims of a token that passed signature and expiry checks."""

    account_id: str
    purpose: TokenPurpose
    security_stamp: str
    issued_at: datetime
    expires_at: datetime
    token_id: str
    new_email: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SessionTokens:
    """Bearer tokens issued by a successful login or refresh."""

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"
