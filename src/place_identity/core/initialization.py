"""Application initialization and setup.

Tasks that must run before the application object is created.
"""

from dotenv import load_dotenv

from place_identity.core.config.settings import settings
from place_identity.core.logging import configure_logging


def initialize_application() -> None:
    """Load .env into the process environment and configure logging."""
    load_dotenv(override=False)
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
