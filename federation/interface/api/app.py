"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI

from federation.interface.api.error_handlers import register_exception_handlers
from federation.interface.api.routes import auth, health
from federation.util.di.container import create_container, setup_di
from federation.util.observability import (
    instrument_fastapi,
    instrument_httpx,
    instrument_redis,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the container (engine, Redis pools) on shutdown."""
    yield
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; the production container by default
    """
    # Outbound calls to providers and the session store
    instrument_httpx()
    instrument_redis()

    app_instance = FastAPI(
        title="Identity Federation API",
        description="Federated login with GitHub and Google, and local token lifecycle",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    setup_di(app_instance, container or create_container())
    register_exception_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
app = create_app()
