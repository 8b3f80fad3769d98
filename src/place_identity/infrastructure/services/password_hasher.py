"""Password hashing with passlib's bcrypt scheme.

Hashing and verification are CPU bound; the lifecycle service calls these
methods through ``asyncio.to_thread``.
"""

from passlib.context import CryptContext

from place_identity.domain.interfaces import IPasswordHasher
from place_identity.domain.value_objects.password_policy import PasswordPolicy


class BcryptPasswordHasher(IPasswordHasher):
    """``IPasswordHasher`` adapter over a passlib ``CryptContext``.

    bcrypt reads at most 72 bytes of a password. Longer passwords are refused
    when hashing and never match when verifying, instead of being truncated.

    Args:
        rounds: bcrypt work factor.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
            bcrypt__truncate_error=True,
        )
        self._dummy_hash = None

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        if _too_long(password):
            return False
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            # Malformed stored hash: treat as a mismatch.
            return False

    def verify_against_dummy(self, password: str) -> bool:
        if self._dummy_hash is None:
            self._dummy_hash = self._context.hash("dummy-password-for-timing")
        if not _too_long(password):
            self._context.verify(password, self._dummy_hash)
        return False


def _too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > PasswordPolicy.MAX_BYTES
