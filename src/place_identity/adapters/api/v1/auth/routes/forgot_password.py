"""Forgot Password endpoint.

Always answers with the same message, whether or not the email belongs to a
confirmed account, so the endpoint cannot be used to enumerate accounts.
"""

import structlog
from fastapi import APIRouter, Request

from place_identity.adapters.api.v1.auth.schemas import ForgotPasswordRequest, MessageResponse
from place_identity.core.config.settings import settings
from place_identity.core.logging import mask_email
from place_identity.core.ratelimiter import limiter
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If the email is registered and confirmed, a reset code has been sent."


@router.post(
    "",
    response_model=MessageResponse,
    summary="Request a password reset code",
    responses={429: {"description": "Rate limit exceeded"}},
)
@limiter.limit(settings.RATE_LIMIT_RECOVERY)
async def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    lifecycle: AccountLifecycleDep,
) -> MessageResponse:
    logger.info("Password reset code requested", email=mask_email(payload.email))
    await lifecycle.forgot_password(payload.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)
