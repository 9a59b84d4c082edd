#!/usr/bin/env python3
"""Apply Alembic migrations, reporting failures to Logfire.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py 3f6c2d1a9b7e
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from interspace.config import Settings
from interspace.util.logging import setup_logging
from interspace.util.observability import configure_logfire


def upgrade(revision: str = "head") -> None:
    """Upgrade the configured database to revision."""
    with logfire.span("migrations.upgrade", revision=revision):
        command.upgrade(Config("alembic.ini"), revision)
    logfire.info("Database migrated", revision=revision)


def main(argv: list[str]) -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    revision = argv[0] if argv else "head"
    try:
        upgrade(revision)
    except Exception as e:
        logfire.error(
            "Database migration failed",
            revision=revision,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # The app must not start on a half-migrated schema
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
