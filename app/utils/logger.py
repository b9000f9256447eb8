"""
Logging helpers.

One call to `setup_logging` at process start; modules obtain their logger
with `get_logger(__name__)`.
"""

import logging
import sys

from app.config import Config


def setup_logging(config: Config) -> None:
    """Configure the root logger from config (LOG_LEVEL / LOG_FORMAT)."""
    level = getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
