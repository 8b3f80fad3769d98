"""Application lifecycle management.

Startup prepares the credential store; shutdown lets queued notifications
finish and releases database connections.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from place_identity.core.config.settings import settings
from place_identity.infrastructure.database.async_db import (
    check_database_health,
    create_db_and_tables,
    dispose_engine,
)
from place_identity.infrastructure.services.notifications import drain_pending_notifications

logger = structlog.get_logger(__name__)

SHUTDOWN_NOTIFICATION_TIMEOUT_SECONDS = 10.0


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Prepare the credential store on startup, drain work on shutdown.

        Raises:
            RuntimeError: If the SQL credential store is unreachable on startup
        """
        if settings.CREDENTIAL_STORE == "sql":
            if not await check_database_health():
                logger.error("database_unavailable_on_startup")
                raise RuntimeError("Database unavailable")
            await create_db_and_tables()
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            credential_store=settings.CREDENTIAL_STORE,
        )

        yield

        await drain_pending_notifications(timeout=SHUTDOWN_NOTIFICATION_TIMEOUT_SECONDS)
        await dispose_engine()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
