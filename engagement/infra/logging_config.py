"""Process-wide logging setup and namespaced logger factory."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from engagement.config import get_settings

ROOT_LOGGER_NAME = "engagement"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    """Configures the engagement logger tree once per process."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        if LoggingConfig._configured:
            return
        settings = get_settings()
        resolved = (level or settings.log_level or "INFO").upper()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(resolved)
        root.addHandler(handler)
        root.propagate = False
        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the engagement namespace (e.g. engagement.pipeline)."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
