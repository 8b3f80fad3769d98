"""Account Entity.

An ``Account`` is the stored credential record of one user. It is an
immutable value: every state change returns a new ``Account`` which the
lifecycle service persists through the credential store. The store owns the
``version`` counter used for optimistic concurrency.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from place_identity.domain.value_objects.email import Email


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_security_stamp() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Account:
    """A registered account and its credential state.

    Attributes:
        account_id: Opaque identifier (uuid4 string).
        email: Address as supplied by the user, trimmed.
        normalized_email: Lowercased lookup key, unique across accounts.
        password_hash: Output of the password hasher, never plaintext.
        security_stamp: Random value rotated whenever credentials or the
            email change; every token embeds the stamp it was issued under.
        email_confirmed: Whether the owner proved control of ``email``.
        failed_access_count: Consecutive failed logins in the current window.
        lockout_end_utc: Logins are refused until this instant, when set.
        lockout_enabled: Whether failures can lock this account at all.
        version: Optimistic-concurrency counter, bumped by every save.
    """

    account_id: str
    email: str
    normalized_email: str
    password_hash: str
    security_stamp: str
    email_confirmed: bool = False
    failed_access_count: int = 0
    lockout_end_utc: Optional[datetime] = None
    lockout_enabled: bool = True
    version: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    @classmethod
    def register(
        cls,
        email: Email,
        password_hash: str,
        lockout_enabled: bool,
        now: Optional[datetime] = None,
    ) -> "Account":
        """Create a new, unconfirmed account."""
        now = now or utc_now()
        return cls(
            account_id=str(uuid.uuid4()),
            email=email.value,
            normalized_email=email.normalized,
            password_hash=password_hash,
            security_stamp=new_security_stamp(),
            lockout_enabled=lockout_enabled,
            created_at=now,
        )

    def confirm_email(self, now: datetime) -> "Account":
        """Mark the email confirmed and rotate the stamp so the token is single-use."""
        return replace(
            self, email_confirmed=True, security_stamp=new_security_stamp(), updated_at=now
        )

    def change_email(self, new_email: Email, now: datetime) -> "Account":
        """Switch to ``new_email``.

        The change is only ever applied with a token delivered to the new
        address, so the new address counts as confirmed.
        """
        return replace(
            self,
            email=new_email.value,
            normalized_email=new_email.normalized,
            email_confirmed=True,
            security_stamp=new_security_stamp(),
            updated_at=now,
        )

    def change_password_hash(self, password_hash: str, now: datetime) -> "Account":
        return replace(
            self,
            password_hash=password_hash,
            security_stamp=new_security_stamp(),
            updated_at=now,
        )
