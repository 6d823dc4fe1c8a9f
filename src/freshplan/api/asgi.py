"""ASGI entrypoint, e.g. ``uvicorn freshplan.api.asgi:app``."""

import logging

from freshplan.api.app import create_app
from freshplan.config import Settings
from freshplan.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
logging.getLogger(__name__).info(
    "Inventory API ready (environment=%s, timezone=%s)",
    settings.environment,
    settings.timezone,
)
