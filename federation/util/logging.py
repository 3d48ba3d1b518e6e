"""Standard library logging setup.

Request handlers log through ``logging``; domain services report through
logfire spans. Both end up on stdout.
"""

import logging
import sys

from federation.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "redis", "asyncpg", "uvicorn.access")


def log_level(settings: Settings) -> int:
    """Root log level for an environment."""
    if settings.debug:
        return logging.DEBUG
    if settings.environment == "production":
        return logging.WARNING
    return logging.INFO


def setup_logging(settings: Settings) -> None:
    """Configure the root logger from settings.

    Args:
        settings: Application settings
    """
    level = log_level(settings)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Login and logout outcomes are kept even when the root is at WARNING
    logging.getLogger("federation").setLevel(min(level, logging.INFO))

    logging.getLogger(__name__).info(
        f"Logging configured: environment={settings.environment}, "
        f"level={logging.getLevelName(level)}"
    )
