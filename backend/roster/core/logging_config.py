from __future__ import annotations

import logging

from roster.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # azure-core logs every HTTP round trip at INFO
    logging.getLogger("azure").setLevel(max(level, logging.WARNING))
