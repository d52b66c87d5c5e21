"""Logging setup for slotwise entry points."""

import logging

from slotwise.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | int | None = None) -> None:
    """Configure root logging once for CLI and server processes.

    Args:
        level: Level name or number. Defaults to LOG_LEVEL from env.
    """
    level = level or LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
