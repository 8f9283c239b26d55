"""Logging setup shared by the API process and job handlers."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach one console handler to the package logger (idempotent)."""
    logger = logging.getLogger("lead_reconciler")
    logger.setLevel(level.upper())

    if logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
