"""Registration endpoint.

Creates an unconfirmed account and queues the confirmation email. The
response is sent without waiting for email delivery.
"""

import structlog
from fastapi import APIRouter, Request, status

from place_identity.adapters.api.v1.auth.schemas import RegisterRequest, RegisterResponse
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
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses={
        400: {"description": "Invalid email or weak password"},
        409: {"description": "Email already registered"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(settings.RATE_LIMIT_REGISTER)
async def register(
    request: Request,
    payload: RegisterRequest,
    lifecycle: AccountLifecycleDep,
) -> RegisterResponse:
    logger.info("Registration requested", email=mask_email(payload.email))
    account = await lifecycle.register(payload.email, payload.password)
    return RegisterResponse.from_account(account)
