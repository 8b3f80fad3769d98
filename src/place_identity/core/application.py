"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured
FastAPI application with middleware, exception handlers and routers
registered.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from place_identity.adapters.api.v1 import api_router
from place_identity.core.config.settings import settings
from place_identity.core.handlers import register_exception_handlers
from place_identity.core.lifecycle import create_lifespan_manager
from place_identity.core.middleware import configure_middleware
from place_identity.core.ratelimiter import limiter


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Account registration, email confirmation, login and password recovery.",
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    # slowapi reads the limiter from app state; set here so it is present
    # even when the lifespan does not run (ASGI test transports).
    app.state.limiter = limiter

    configure_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    return app
