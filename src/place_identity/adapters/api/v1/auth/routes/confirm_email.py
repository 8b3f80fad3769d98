"""Email confirmation endpoint.

Target of the links sent by registration, confirmation resend and email
change. A link carrying ``changedEmail`` completes an email change; one
without it confirms the current address.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from place_identity.adapters.api.v1.auth.schemas import MessageResponse
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

router = APIRouter()


@router.get(
    "",
    response_model=MessageResponse,
    summary="Confirm an email address",
    responses={
        401: {"description": "Invalid or expired confirmation code"},
        404: {"description": "Unknown account"},
        409: {"description": "New email already registered"},
    },
)
async def confirm_email(
    lifecycle: AccountLifecycleDep,
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
    code: Annotated[str, Query(min_length=1)],
    changed_email: Annotated[Optional[str], Query(alias="changedEmail")] = None,
) -> MessageResponse:
    if changed_email:
        await lifecycle.change_email(user_id, code, changed_email)
        return MessageResponse(message="Thank you for confirming your email change.")

    await lifecycle.confirm_email(user_id, code)
    return MessageResponse(message="Thank you for confirming your email.")
