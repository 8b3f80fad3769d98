"""Rate limiting for the public authentication endpoints.

Limits are keyed by client IP and applied per route with
``@limiter.limit(...)``. The limiter is a module-level singleton so that the
route decorators and ``app.state.limiter`` share one instance.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from place_identity.core.config.settings import settings


def get_limiter() -> Limiter:
    """Factory function for the rate limiter.

    Returns:
        Limiter: A configured ``slowapi.Limiter``, disabled when
        ``RATE_LIMIT_ENABLED`` is false.
    """
    return Limiter(
        key_func=get_remote_address,
        enabled=settings.RATE_LIMIT_ENABLED,
        default_limits=[],
        storage_uri=settings.RATE_LIMIT_STORAGE_URL,
        strategy=settings.RATE_LIMIT_STRATEGY,
    )


limiter = get_limiter()
