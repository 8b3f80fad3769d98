"""Login endpoint.

Unknown emails, wrong passwords and locked-out accounts all produce the same
``401`` response.
"""

import structlog
from fastapi import APIRouter, Request

from place_identity.adapters.api.v1.auth.schemas import LoginRequest, TokenResponse
from place_identity.core.config.settings import settings
from place_identity.core.logging import mask_email
from place_identity.core.ratelimiter import limiter
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=TokenResponse,
    summary="Sign in with email and password",
    responses={
        401: {"description": "Invalid credentials or unconfirmed email"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(
    request: Request,
    payload: LoginRequest,
    lifecycle: AccountLifecycleDep,
) -> TokenResponse:
    logger.info("Login requested", email=mask_email(payload.email))
    tokens = await lifecycle.login(payload.email, payload.password)
    return TokenResponse.from_tokens(tokens)
