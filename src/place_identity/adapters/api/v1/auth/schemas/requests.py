from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    email: EmailStr = Field(..., examples=["jane@example.com"])
    password: str = Field(..., min_length=1, max_length=512, examples=["Str0ngP@ssw0rd"])


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``.

    ``email`` is any string: a malformed address simply matches no account,
    which keeps the response identical to the unknown-email case.
    """

    email: str = Field(..., min_length=1, max_length=254, examples=["jane@example.com"])
    password: str = Field(..., min_length=1, max_length=512, examples=["Str0ngP@ssw0rd"])


class RefreshRequest(BaseModel):
    """Payload expected by ``POST /auth/refresh``."""

    refresh_token: str = Field(..., min_length=1)


class ResendConfirmationRequest(BaseModel):
    """Payload expected by ``POST /auth/resend-confirmation``."""

    email: EmailStr = Field(..., examples=["jane@example.com"])


class ForgotPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/forgot-password``."""

    email: EmailStr = Field(
        ...,
        examples=["jane@example.com"],
        description="Email address to send password reset instructions to",
    )


class ResetPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/reset-password``."""

    email: str = Field(..., min_length=1, max_length=254, examples=["jane@example.com"])
    reset_code: str = Field(..., min_length=1, description="Code received via email")
    new_password: str = Field(..., min_length=1, max_length=512, examples=["Str0ngP@ssw0rd"])


class ManageInfoRequest(BaseModel):
    """Payload expected by ``POST /auth/manage/info``.

    ``new_password`` requires ``old_password``. ``new_email`` starts an
    email change: a confirmation link goes to the new address.
    """

    new_email: Optional[EmailStr] = None
    new_password: Optional[str] = Field(default=None, min_length=1, max_length=512)
    old_password: Optional[str] = Field(default=None, max_length=512)
