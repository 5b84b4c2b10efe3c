"""Logging helpers for the SolusVM client."""

import logging
import sys

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Form fields that must never reach a log line
SENSITIVE_FIELDS = frozenset({"key", "password", "rootpassword", "vncpassword"})


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(name)


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Configure the package logger with a stderr handler.

    Calling this more than once only updates the level.

    Args:
        level: Log level name or number. Defaults to the LOG_LEVEL setting.

    Returns:
        The configured package logger
    """
    if level is None:
        from solusvm_client.utils.config import get_settings

        level = get_settings().log_level

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("solusvm_client")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def mask_sensitive(params: dict) -> dict:
    """Return a copy of request fields with secrets replaced by asterisks."""
    return {
        name: "***" if name in SENSITIVE_FIELDS else value
        for name, value in params.items()
    }
