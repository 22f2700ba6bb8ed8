"""Logging setup for the API process."""

import logging
from typing import Optional

from gamemaster.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once.

    Args:
        level: Log level name. Defaults to ``settings.log_level``.
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    _configured = True
