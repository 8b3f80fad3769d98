from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

Each error family of ``place_identity.core.exceptions`` is translated into
one HTTP status. Responses carry ``detail`` (human message) and ``code``
(machine code).
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette import status
from structlog import get_logger

from place_identity.core.exceptions import (
    INVALID_CREDENTIALS_MESSAGE,
    AccountLockedOutError,
    AuthenticationError,
    ConflictError,
    IdentityError,
    NotFoundError,
    ValidationError,
    WeakPasswordError,
)

__all__ = [
    "validation_error_handler",
    "authentication_error_handler",
    "account_locked_out_error_handler",
    "not_found_error_handler",
    "conflict_error_handler",
    "rate_limit_exception_handler",
    "identity_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles ``ValidationError``, returning a ``400 Bad Request``.

    ``WeakPasswordError`` additionally lists every unmet password requirement
    under ``errors``.
    """
    content = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, WeakPasswordError):
        content["errors"] = exc.failures
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles ``AuthenticationError``, returning a ``401 Unauthorized``.

    This covers wrong credentials, unconfirmed emails and every kind of
    rejected token.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.message, "code": exc.code},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def account_locked_out_error_handler(
    request: Request, exc: AccountLockedOutError
) -> JSONResponse:
    """Handles ``AccountLockedOutError`` exactly like invalid credentials.

    A distinct response would tell an attacker that the probed email is
    registered. The lockout stays visible to the owner through the account
    info endpoint.
    """
    logger.warning(
        "Login refused for locked out account",
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": INVALID_CREDENTIALS_MESSAGE, "code": "invalid_credentials"},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handles ``NotFoundError``, returning a ``404 Not Found``."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message, "code": exc.code},
    )


async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Handles ``ConflictError``, returning a ``409 Conflict``.

    Raised for duplicate emails and for writes that kept losing
    optimistic-concurrency races.
    """
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": exc.message, "code": exc.code},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handles exceptions raised by slowapi when a rate limit is exceeded.

    Args:
        request: The incoming FastAPI request.
        exc: The RateLimitExceeded exception instance.

    Returns:
        A JSONResponse with status code 429.
    """
    logger.warning(
        "rate_limit_exceeded",
        client_ip=_client_ip(request),
        path=request.url.path,
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Too many requests. Please try again later.", "code": "rate_limited"},
    )


async def identity_error_handler(request: Request, exc: IdentityError) -> JSONResponse:
    """Handles the base ``IdentityError``, returning a ``500 Internal Server Error``.

    Fallback for application errors without a more specific handler.
    """
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred.", "code": "internal_error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so the most
    specific registered class wins.
    """
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(AccountLockedOutError, account_locked_out_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(ConflictError, conflict_error_handler)
    app.add_exception_handler(IdentityError, identity_error_handler)
