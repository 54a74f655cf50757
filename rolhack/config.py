"""
Configuration - Environment settings for the command-line tools.

The engine itself reads no configuration: every rule comes from the world
definition. These settings only shape logging and default export output.
"""

import logging
import os

# Environment configuration
ROLHACK_ENV = os.getenv("ROLHACK_ENV", "development")
ROLHACK_LOG_LEVEL = os.getenv("ROLHACK_LOG_LEVEL", "WARNING")
ROLHACK_EXPORT_FORMAT = os.getenv("ROLHACK_EXPORT_FORMAT", "markdown")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level=None):
    """
    Attach a stderr handler to the root logger.

    Args:
        level: Level name or number; falls back to ROLHACK_LOG_LEVEL.
    """
    level = level or ROLHACK_LOG_LEVEL
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("rolhack").setLevel(level)
