from __future__ import annotations

import logging

from app.core.config import settings

# Request lines from the OpenAI SDK transport; one per embedding call otherwise.
_NOISY_LOGGERS = ("httpx", "httpcore")


# Centralized app logging configuration (format + level).
def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
