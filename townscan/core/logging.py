"""Logging configuration."""

import logging
import sys
from typing import Optional

from townscan.core.config import settings

# Chatty at INFO: one line per request or per parsed node
NOISY_LOGGERS = ("httpx", "httpcore", "readability", "readability.readability")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure application logging; ``level`` overrides the configured level."""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
