from .requests import (
    ForgotPasswordRequest,
    LoginRequest,
    ManageInfoRequest,
    RefreshRequest,
    RegisterRequest,
    ResendConfirmationRequest,
    ResetPasswordRequest,
)
from .responses import AccountInfoOut, MessageResponse, RegisterResponse, TokenResponse

__all__ = [
    "AccountInfoOut",
    "ForgotPasswordRequest",
    "LoginRequest",
    "ManageInfoRequest",
    "MessageResponse",
    "RefreshRequest",
    "RegisterRequest",
    "RegisterResponse",
    "ResendConfirmationRequest",
    "ResetPasswordRequest",
    "TokenResponse",
]
