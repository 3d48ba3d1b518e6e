"""Logfire setup and instrumentation.

Domain services report through logfire directly:

    with logfire.span("token_lifecycle.revoke", user_id=str(user_id)):
        logfire.info("Session revoked", user_id=str(user_id))

Token values are never passed as span or log attributes.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from federation.config import ObservabilitySettings, Settings

SERVICE_NAME = "identity-federation"


def should_send_to_logfire(settings: ObservabilitySettings) -> bool:
    """Explicit setting wins; otherwise send only when a token is present."""
    if settings.send_to_logfire is not None:
        return settings.send_to_logfire
    return bool(settings.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once at process start.

    Args:
        settings: Application settings
    """
    send = should_send_to_logfire(settings.observability)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send,
    )


def _request_attributes(request, attributes):
    # Path and method only; headers and query strings may carry credentials
    mapped = dict(attributes)
    mapped["method"] = getattr(request, "method", None)
    url = getattr(request, "url", None)
    if url is not None:
        mapped["path"] = url.path
    return mapped


def instrument_fastapi(app: FastAPI) -> None:
    """Trace incoming requests without capturing headers.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace queries on the users/identity_links database.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)


def instrument_httpx() -> None:
    """Trace calls to the identity providers."""
    logfire.instrument_httpx()


def instrument_redis() -> None:
    """Trace session store and event bus commands."""
    logfire.instrument_redis()
