"""Logging configuration for the application."""
import logging
import sys
from abtrack.config import settings

_level = logging.DEBUG if settings.environment == "development" else logging.INFO

logger = logging.getLogger("abtrack")
logger.setLevel(_level)

handler = logging.StreamHandler(sys.stdout)
handler.setLevel(_level)

formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
handler.setFormatter(formatter)

# Add handler to logger if not already added
if not logger.handlers:
    logger.addHandler(handler)

# Prevent duplicate logs
logger.propagate = False

__all__ = ["logger"]
