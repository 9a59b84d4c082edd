"""Stdlib logging setup for scripts and third-party libraries.

Application code logs through logfire; this only sets levels for the
root logger and the noisy libraries underneath it.
"""

import logging
import sys

from interspace.config import Settings

# Libraries kept at WARNING unless debugging
QUIET_LOGGERS = ("httpx", "httpcore", "asyncpg", "alembic.runtime.migration")


def setup_logging(settings: Settings) -> None:
    """Configure root logging for the current environment.

    Args:
        settings: Application settings
    """
    if settings.debug:
        level = logging.DEBUG
    elif settings.environment == "production":
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    quiet_level = logging.DEBUG if settings.debug else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )
    logging.getLogger("interspace").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a script module."""
    return logging.getLogger(name)
