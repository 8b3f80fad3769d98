from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from place_identity.core.config.settings import settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe. Does not touch the credential store."""
    return HealthResponse(
        status="ok",
        env=settings.APP_ENV,
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc),
    )
