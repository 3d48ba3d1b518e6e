#!/usr/bin/env python3
"""Apply the users/identity_links schema before the API starts."""

import sys

import logfire
from alembic import command
from alembic.config import Config

from federation.config import Settings
from federation.util.observability import configure_logfire


def main() -> int:
    """Upgrade the database to the latest revision."""
    settings = Settings()
    configure_logfire(settings)

    # migrations/env.py takes the URL from Settings, not from alembic.ini
    config = Config("alembic.ini")

    with logfire.span("run_migrations", environment=settings.environment):
        try:
            command.upgrade(config, "head")
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The container must not start on a half-migrated schema
            raise

    logfire.info("Database schema is up to date")
    return 0


if __name__ == "__main__":
    sys.exit(main())
