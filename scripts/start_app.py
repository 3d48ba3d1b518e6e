#!/usr/bin/env python3
"""Serve the identity federation API with uvicorn."""

import sys

import logfire
import uvicorn

from federation.config import Settings
from federation.util.logging import setup_logging
from federation.util.observability import configure_logfire


def main() -> int:
    """Configure logging, then run the server until it exits."""
    settings = Settings()

    # Both must be configured before the app module is imported
    setup_logging(settings)
    configure_logfire(settings)

    logfire.info(
        "Starting identity federation API",
        port=settings.port,
        refresh_rotation=settings.tokens.refresh_rotation,
        revocation_fail_open=settings.revocation.fail_open,
    )
    if settings.revocation.fail_open:
        logfire.warn("Blacklist outages will let revoked tokens through")

    try:
        uvicorn.run(
            "federation.interface.api.app:app",
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
    sys.exit(main())
