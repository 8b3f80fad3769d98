"""Request-scoped dependencies shared by the authentication routes."""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from place_identity.core.exceptions import AuthenticationError
from place_identity.domain.entities.account import Account
from place_identity.infrastructure.dependency_injection.auth_dependencies import (
    AccountLifecycleDep,
)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_account(
    lifecycle: AccountLifecycleDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Account:
    """Resolve the ``Authorization: Bearer`` access token to its account.

    Raises:
        AuthenticationError: If no bearer token was sent.
        InvalidOrExpiredTokenError: If the token does not validate, including
            when the account's credentials changed after it was issued.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated.", "not_authenticated")
    return await lifecycle.authenticate(credentials.credentials)


CurrentAccount = Annotated[Account, Depends(get_current_account)]
