"""Session refresh endpoint."""

from fastapi import APIRouter

from place_identity.adapters.api.v1.auth.schemas import RefreshRequest, TokenResponse
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

router = APIRouter()


@router.post(
    "",
    response_model=TokenResponse,
    summary="Exchange a refresh token for new session tokens",
    responses={401: {"description": "Invalid, expired or revoked refresh token"}},
)
async def refresh(payload: RefreshRequest, lifecycle: AccountLifecycleDep) -> TokenResponse:
    tokens = await lifecycle.refresh(payload.refresh_token)
    return TokenResponse.from_tokens(tokens)
