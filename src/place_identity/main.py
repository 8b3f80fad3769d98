"""Main application entry point for the FastAPI application.

Serve with an ASGI server, e.g. ``uvicorn place_identity.main:app``.
"""

from place_identity.core.application import create_application
from place_identity.core.initialization import initialize_application

initialize_application()

app = create_application()
