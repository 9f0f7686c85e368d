"""Logging setup for the API process."""

import logging
import sys


def configure_logging(level: str) -> logging.Logger:
    """Configure root logging with a single stdout stream handler.

    Args:
        level: Log level name, e.g. "INFO" or "debug"

    Returns:
        The package logger
    """
    root = logging.getLogger()
    root.handlers.clear()
    if isinstance(level, str):
        normalized_level = getattr(logging, level.upper(), logging.INFO)
    else:
        normalized_level = logging.INFO
    root.setLevel(normalized_level)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    logging.getLogger("aiomysql").setLevel(logging.WARNING)

    return logging.getLogger("dashboard_api")
