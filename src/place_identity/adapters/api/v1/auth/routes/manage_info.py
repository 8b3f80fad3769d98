"""Account self-service endpoints for the signed-in owner."""

from fastapi import APIRouter

from place_identity.adapters.api.v1.auth.dependencies import CurrentAccount
from place_identity.adapters.api.v1.auth.schemas import AccountInfoOut, ManageInfoRequest
from place_identity.core.exceptions import ValidationError
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

router = APIRouter()


@router.get("", response_model=AccountInfoOut, summary="Describe the signed-in account")
async def get_info(account: CurrentAccount, lifecycle: AccountLifecycleDep) -> AccountInfoOut:
    info = await lifecycle.get_info(account.account_id)
    return AccountInfoOut.from_info(info)


@router.post(
    "",
    response_model=AccountInfoOut,
    summary="Change the password and/or start an email change",
    responses={400: {"description": "Wrong or missing old password, weak new password"}},
)
async def update_info(
    payload: ManageInfoRequest,
    account: CurrentAccount,
    lifecycle: AccountLifecycleDep,
) -> AccountInfoOut:
    """Apply a password change and/or send an email-change link.

    Changing the password rotates the security stamp, so the access token
    used for this call stops working afterwards.
    """
    if payload.new_password is not None:
        if not payload.old_password:
            raise ValidationError(
                "The old password is required to set a new password.", "old_password_required"
            )
        await lifecycle.change_password(
            account.account_id, payload.old_password, payload.new_password
        )

    if payload.new_email is not None:
        await lifecycle.request_email_change(account.account_id, payload.new_email)

    info = await lifecycle.get_info(account.account_id)
    return AccountInfoOut.from_info(info)
