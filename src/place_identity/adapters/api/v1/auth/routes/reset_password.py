"""Reset Password endpoint."""

from fastapi import APIRouter

from place_identity.adapters.api.v1.auth.schemas import MessageResponse, ResetPasswordRequest
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    summary="Set a new password with a reset code",
    responses={
        400: {"description": "Weak password"},
        401: {"description": "Invalid or expired reset code"},
    },
)
async def reset_password(payload: ResetPasswordRequest, lifecycle: AccountLifecycleDep) -> MessageResponse:
    await lifecycle.reset_password(payload.email, payload.reset_code, payload.new_password)
    return MessageResponse(message="Your password has been reset.")
