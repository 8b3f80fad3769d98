from __future__ import annotations

"""Centralized, structured exception hierarchy for the identity service.

Every error carries a human-readable ``message`` and a machine-readable
``code``. The four families below map one-to-one onto HTTP status codes in
the API layer (see ``place_identity.core.handlers``):

- ``ValidationError``     -> 400 Bad Request
- ``AuthenticationError`` -> 401 Unauthorized
- ``NotFoundError``       -> 404 Not Found
- ``ConflictError``       -> 409 Conflict
"""

from datetime import datetime
from enum import Enum
from typing import Final, Optional, Sequence

__all__: Final = [
    "IdentityError",
    "ValidationError",
    "InvalidEmailError",
    "WeakPasswordError",
    "InvalidOldPasswordError",
    "ConflictError",
    "EmailAlreadyInUseError",
    "ConcurrencyConflictError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "AccountLockedOutError",
    "EmailNotConfirmedError",
    "TokenFailure",
    "InvalidOrExpiredTokenError",
    "NotFoundError",
    "AccountNotFoundError",
    "NotificationError",
    "TemplateRenderError",
    "INVALID_CREDENTIALS_MESSAGE",
    "INVALID_TOKEN_MESSAGE",
]

INVALID_CREDENTIALS_MESSAGE: Final = "Invalid email or password."
INVALID_TOKEN_MESSAGE: Final = "Invalid or expired token."


class IdentityError(Exception):
    """Base exception class for all custom errors in the identity service.

    Attributes:
        message (str): A human-readable error message, suitable for logging
                       and for returning to API clients.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Validation errors (400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(IdentityError):
    """Raised when input fails a domain validation rule."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class InvalidEmailError(ValidationError):
    """Raised when an email address is malformed."""

    def __init__(self, message: str = "Invalid email address.", code: str = "invalid_email"):
        super().__init__(message, code)


class WeakPasswordError(ValidationError):
    """Raised when a new password does not satisfy the password policy.

    Attributes:
        failures: One entry per unmet requirement, in policy order.
    """

    def __init__(
        self,
        failures: Sequence[str],
        message: str = "Password does not meet the security requirements.",
        code: str = "weak_password",
    ):
        super().__init__(message, code)
        self.failures = list(failures)


class InvalidOldPasswordError(ValidationError):
    """Raised when the current password supplied for a password change is wrong."""

    def __init__(
        self, message: str = "The old password is incorrect.", code: str = "invalid_old_password"
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Conflict errors (409 Conflict)
# ---------------------------------------------------------------------------


class ConflictError(IdentityError):
    """Raised when a command conflicts with the current stored state."""

    def __init__(self, message: str, code: str = "conflict"):
        super().__init__(message, code)


class EmailAlreadyInUseError(ConflictError):
    """Raised when an email address is already registered to an account."""

    def __init__(
        self, message: str = "Email address is already registered.", code: str = "email_in_use"
    ):
        super().__init__(message, code)


class ConcurrencyConflictError(ConflictError):
    """Raised when an optimistic-concurrency write loses to a concurrent writer."""

    def __init__(
        self,
        message: str = "The account was modified concurrently. Please retry.",
        code: str = "concurrency_conflict",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Authentication errors (401 Unauthorized)
# ---------------------------------------------------------------------------


class AuthenticationError(IdentityError):
    """Base for authentication failures. Maps to ``401 Unauthorized``."""

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when the email/password pair does not authenticate.

    The same message is used for an unknown email and for a wrong password
    so that callers cannot enumerate registered accounts.
    """

    def __init__(
        self, message: str = INVALID_CREDENTIALS_MESSAGE, code: str = "invalid_credentials"
    ):
        super().__init__(message, code)


class AccountLockedOutError(AuthenticationError):
    """Raised when a login is attempted while the account is locked out.

    The HTTP layer renders this exactly like ``InvalidCredentialsError``.
    """

    def __init__(
        self,
        lockout_end_utc: Optional[datetime] = None,
        message: str = "Account is temporarily locked.",
        code: str = "account_locked_out",
    ):
        super().__init__(message, code)
        self.lockout_end_utc = lockout_end_utc


class EmailNotConfirmedError(AuthenticationError):
    """Raised on a correct password when the account email is still unconfirmed."""

    def __init__(
        self,
        message: str = "Email address must be confirmed before signing in.",
        code: str = "email_not_confirmed",
    ):
        super().__init__(message, code)


class TokenFailure(str, Enum):
    """Why a security token was rejected. Logged, never shown to callers."""

    MALFORMED = "malformed"
    PURPOSE_MISMATCH = "purpose_mismatch"
    EXPIRED = "expired"
    SUBJECT_MISMATCH = "subject_mismatch"
    CONTEXT_MISMATCH = "context_mismatch"
    STAMP_MISMATCH = "stamp_mismatch"


class InvalidOrExpiredTokenError(AuthenticationError):
    """Raised for every kind of token rejection.

    ``reason`` distinguishes the failures for logs and tests; the message and
    code are identical for all of them.
    """

    def __init__(self, reason: TokenFailure, message: str = INVALID_TOKEN_MESSAGE):
        super().__init__(message, "invalid_or_expired_token")
        self.reason = reason


# ---------------------------------------------------------------------------
# Not found (404 Not Found)
# ---------------------------------------------------------------------------


class NotFoundError(IdentityError):
    """Raised when an addressed resource does not exist."""

    def __init__(self, message: str, code: str = "not_found"):
        super().__init__(message, code)


class AccountNotFoundError(NotFoundError):
    """Raised when an account id does not resolve to an account."""

    def __init__(self, message: str = "Account not found.", code: str = "account_not_found"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Notification errors (logged by the dispatcher, never returned to callers)
# ---------------------------------------------------------------------------


class NotificationError(IdentityError):
    """Raised when a notification cannot be rendered or delivered."""

    def __init__(self, message: str, code: str = "notification_error"):
        super().__init__(message, code)


class TemplateRenderError(NotificationError):
    """Raised when an email template is missing or fails to render."""

    def __init__(self, message: str, code: str = "template_render_error"):
        super().__init__(message, code)
