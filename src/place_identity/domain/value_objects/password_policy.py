"""Password strength policy.

The policy checks a candidate password against every configured requirement
and reports all unmet requirements at once, so a client can show the full
list rather than one complaint per attempt.
"""

from dataclasses import dataclass
from typing import ClassVar, List

from place_identity.core.exceptions import WeakPasswordError


@dataclass(frozen=True, slots=True)
class PasswordPolicy:
    """Configurable password strength requirements.

    Attributes:
        min_length: Minimum number of characters.
        max_length: Maximum number of characters. Independently of it, a
            password may not exceed ``MAX_BYTES`` once UTF-8 encoded, the
            most bcrypt reads.
        require_digit: At least one ``0-9`` character.
        require_uppercase: At least one uppercase letter.
        require_lowercase: At least one lowercase letter.
        require_non_alphanumeric: At least one character that is neither a
            letter nor a digit.
        required_unique_chars: Minimum number of distinct characters.
    """

    min_length: int = 8
    max_length: int = 72
    require_digit: bool = True
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_non_alphanumeric: bool = True
    required_unique_chars: int = 6

    TOO_SHORT: ClassVar[str] = "password_too_short"
    TOO_LONG: ClassVar[str] = "password_too_long"
    REQUIRES_DIGIT: ClassVar[str] = "password_requires_digit"
    REQUIRES_UPPER: ClassVar[str] = "password_requires_upper"
    REQUIRES_LOWER: ClassVar[str] = "password_requires_lower"
    REQUIRES_NON_ALPHANUMERIC: ClassVar[str] = "password_requires_non_alphanumeric"
    REQUIRES_UNIQUE_CHARS: ClassVar[str] = "password_requires_unique_chars"

    MAX_BYTES: ClassVar[int] = 72

    @classmethod
    def from_settings(cls, settings) -> "PasswordPolicy":
        return cls(
            min_length=settings.PASSWORD_MIN_LENGTH,
            max_length=settings.PASSWORD_MAX_LENGTH,
            require_digit=settings.PASSWORD_REQUIRE_DIGIT,
            require_uppercase=settings.PASSWORD_REQUIRE_UPPERCASE,
            require_lowercase=settings.PASSWORD_REQUIRE_LOWERCASE,
            require_non_alphanumeric=settings.PASSWORD_REQUIRE_NON_ALPHANUMERIC,
            required_unique_chars=settings.PASSWORD_REQUIRED_UNIQUE_CHARS,
        )

    def failures(self, password: str) -> List[str]:
        """Return the codes of every requirement ``password`` does not meet."""
        password = password or ""
        failures: List[str] = []

        if len(password) < self.min_length:
            failures.append(self.TOO_SHORT)
        if len(password) > self.max_length or len(password.encode("utf-8")) > self.MAX_BYTES:
            failures.append(self.TOO_LONG)
        if self.require_digit and not any(ch.isdigit() for ch in password):
            failures.append(self.REQUIRES_DIGIT)
        if self.require_uppercase and not any(ch.isupper() for ch in password):
            failures.append(self.REQUIRES_UPPER)
        if self.require_lowercase and not any(ch.islower() for ch in password):
            failures.append(self.REQUIRES_LOWER)
        if self.require_non_alphanumeric and all(ch.isalnum() for ch in password):
            failures.append(self.REQUIRES_NON_ALPHANUMERIC)
        if len(set(password)) < self.required_unique_chars:
            failures.append(self.REQUIRES_UNIQUE_CHARS)

        return failures

    def validate(self, password: str) -> None:
        """Raise ``WeakPasswordError`` listing every unmet requirement."""
        failures = self.failures(password)
        if failures:
            raise WeakPasswordError(failures)
