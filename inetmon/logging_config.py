"""Logging configuration for InetMon."""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every request at INFO; one probe cycle per tick would
# otherwise flood the output.
NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(value: str | None) -> int:
    """Map a level name to a logging constant, falling back to INFO."""
    level = logging.getLevelName((value or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> int:
    """Configure application-wide logging.

    Uses ``level`` when given, else the INETMON_LOG_LEVEL environment
    variable (default: INFO). Logs to stderr. HTTP client request logging is
    only shown at DEBUG.

    Environment Variables:
        INETMON_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Examples:
        $ INETMON_LOG_LEVEL=DEBUG python -m inetmon
        $ INETMON_LOG_LEVEL=WARNING INETMON_HEADLESS=1 python -m inetmon

    Returns:
        The effective root log level
    """
    if level is None:
        level = os.environ.get("INETMON_LOG_LEVEL")
    log_level = resolve_log_level(level)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    library_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    logging.getLogger(__name__).info(
        "Logging configured: level=%s", logging.getLevelName(log_level)
    )
    return log_level
