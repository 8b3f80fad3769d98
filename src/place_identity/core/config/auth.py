"""Authentication, token, lockout and password-policy settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_SECRET_KEY = "development-only-secret-key-change-me-0123456789"


class AuthSettings(BaseSettings):
    """Defines settings for token signing, account lockout and password strength.

    Defaults mirror the lockout and password options the service has always
    shipped with: three failed attempts lock an account for two minutes, and
    passwords need eight characters drawn from every character class with at
    least six distinct characters.

    Security Note:
        - SECRET_KEY signs every security and session token. It must be a
          random string of at least 32 characters and is refused in staging
          and production when left at its development default.
        - Rotating SECRET_KEY invalidates every outstanding token.
    """

    SECRET_KEY: str = Field(default=DEFAULT_SECRET_KEY, min_length=32)
    TOKEN_ALGORITHM: str = "HS256"

    # Security token lifetimes
    EMAIL_CONFIRMATION_TOKEN_EXPIRE_MINUTES: int = Field(ge=1, default=24 * 60)
    EMAIL_CHANGE_TOKEN_EXPIRE_MINUTES: int = Field(ge=1, default=24 * 60)
    PASSWORD_RESET_TOKEN_EXPIRE_MINUTES: int = Field(ge=1, le=1440, default=15)

    # Session token lifetimes
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(ge=1, default=15)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(ge=1, default=7)

    # Lockout
    LOCKOUT_MAX_FAILED_ATTEMPTS: int = Field(ge=1, default=3)
    LOCKOUT_DURATION_MINUTES: int = Field(ge=1, default=2)
    LOCKOUT_ALLOWED_FOR_NEW_ACCOUNTS: bool = True

    # Sign-in
    REQUIRE_CONFIRMED_EMAIL: bool = True

    # Password policy
    PASSWORD_MIN_LENGTH: int = Field(ge=1, default=8)
    PASSWORD_MAX_LENGTH: int = Field(ge=8, le=72, default=72)
    PASSWORD_REQUIRE_DIGIT: bool = True
    PASSWORD_REQUIRE_UPPERCASE: bool = True
    PASSWORD_REQUIRE_LOWERCASE: bool = True
    PASSWORD_REQUIRE_NON_ALPHANUMERIC: bool = True
    PASSWORD_REQUIRED_UNIQUE_CHARS: int = Field(ge=0, default=6)

    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)
