#!/usr/bin/env python3
"""Serve the API with uvicorn, optionally migrating the database first.

Usage:
    python scripts/start_app.py [--migrate]
"""

import argparse
import sys

import logfire
import uvicorn

from interspace.config import Settings
from interspace.util.logging import get_logger, setup_logging
from interspace.util.observability import configure_logfire

logger = get_logger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start the Interspace API")
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="apply pending migrations before serving",
    )
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    """Start the server; startup errors are reported to Logfire."""
    args = parse_args(argv)
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    try:
        if args.migrate:
            # Imported lazily; alembic reads alembic.ini from the cwd
            from run_migrations import upgrade

            upgrade()

        logger.info("Serving on 0.0.0.0:%s", settings.port)
        logfire.info(
            "Starting API", environment=settings.environment, git_sha=settings.git_sha
        )
        # Importing the module builds the app and its DI container
        uvicorn.run(
            "interspace.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
