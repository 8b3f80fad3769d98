"""Resend-confirmation endpoint.

Always answers with the same message, whether or not the email belongs to an
unconfirmed account.
"""

import structlog
from fastapi import APIRouter, Request

from place_identity.adapters.api.v1.auth.schemas import MessageResponse, ResendConfirmationRequest
from place_identity.core.config.settings import settings
from place_identity.core.logging import mask_email
from place_identity.core.ratelimiter import limiter
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

RESEND_CONFIRMATION_MESSAGE = (
    "If the email belongs to an unconfirmed account, a confirmation link has been sent."
)


@router.post(
    "",
    response_model=MessageResponse,
    summary="Resend the email confirmation link",
    responses={429: {"description": "Rate limit exceeded"}},
)
@limiter.limit(settings.RATE_LIMIT_RECOVERY)
async def resend_confirmation(
    request: Request,
    payload: ResendConfirmationRequest,
    lifecycle: AccountLifecycleDep,
) -> MessageResponse:
    logger.info("Confirmation resend requested", email=mask_email(payload.email))
    await lifecycle.resend_confirmation(payload.email)
    return MessageResponse(message=RESEND_CONFIRMATION_MESSAGE)
