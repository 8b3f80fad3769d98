"""Authentication router package: bundles the account lifecycle endpoints."""

from fastapi import APIRouter

from .routes import confirm_email as confirm_email_route
from .routes import forgot_password as forgot_password_route
from .routes import login as login_route
from .routes import manage_info as manage_info_route
from .routes import refresh as refresh_route
from .routes import register as register_route
from .routes import resend_confirmation as resend_confirmation_route
from .routes import reset_password as reset_password_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(register_route.router, prefix="/register")
router.include_router(confirm_email_route.router, prefix="/confirm-email")
router.include_router(login_route.router, prefix="/login")
router.include_router(refresh_route.router, prefix="/refresh")
router.include_router(resend_confirmation_route.router, prefix="/resend-confirmation")
router.include_router(forgot_password_route.router, prefix="/forgot-password")
router.include_router(reset_password_route.router, prefix="/reset-password")
router.include_router(manage_info_route.router, prefix="/manage/info")

__all__ = ["router"]
