"""Logging setup shared by the gateway, the draft function and the CLI.

Usage:
    from draft_assistant.config.log_setup import configure_logging
    configure_logging(settings.log_level)

Modules log through ``logging.getLogger(__name__)``.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach one stdout handler to the package logger (idempotent)."""
    logger = logging.getLogger("draft_assistant")
    resolved = logging.getLevelName(level) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logger.setLevel(resolved)

    # Avoid adding duplicate handlers on repeated startup (warm containers)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
