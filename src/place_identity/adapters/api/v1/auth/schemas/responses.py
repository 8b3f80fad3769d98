from __future__ import annotations

"""Response models for authentication endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from place_identity.domain.entities.account import Account
from place_identity.domain.services.authentication.account_lifecycle import AccountInfo
from place_identity.domain.value_objects.security_token import SessionTokens


class MessageResponse(BaseModel):
    message: str


class RegisterResponse(BaseModel):
    account_id: str
    email: str
    email_confirmed: bool

    @classmethod
    def from_account(cls, account: Account) -> "RegisterResponse":
        return cls(
            account_id=account.account_id,
            email=account.email,
            email_confirmed=account.email_confirmed,
        )


class TokenResponse(BaseModel):
    """Bearer tokens issued by login and refresh."""

    token_type: str = "bearer"
    access_token: str
    refresh_token: str
    expires_in: int

    @classmethod
    def from_tokens(cls, tokens: SessionTokens) -> "TokenResponse":
        return cls(
            token_type=tokens.token_type,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
        )


class AccountInfoOut(BaseModel):
    """What ``/auth/manage/info`` reports about the caller's own account."""

    account_id: str
    email: str
    email_confirmed: bool
    is_locked_out: bool
    lockout_end_utc: Optional[datetime] = None

    @classmethod
    def from_info(cls, info: AccountInfo) -> "AccountInfoOut":
        return cls(
            account_id=info.account_id,
            email=info.email,
            email_confirmed=info.email_confirmed,
            is_locked_out=info.is_locked_out,
            lockout_end_utc=info.lockout_end_utc,
        )
