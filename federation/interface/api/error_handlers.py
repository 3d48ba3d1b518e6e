"""Exception handlers mapping domain and adapter errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from federation.adapter.error import ProviderFailureError
from federation.domain.error import (
    ConflictError,
    CredentialError,
    InvalidAssertionError,
    NotFoundError,
    RevocationFailedError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

# Same body for every authentication failure, whatever the cause
CREDENTIALS_DETAIL = "Invalid or expired credentials"


def _error_response(
    status_code: int, detail: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"detail": detail}, headers=headers
    )


def credentials_response() -> JSONResponse:
    """Uniform 401 response."""
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        CREDENTIALS_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install exception handlers for domain and adapter errors."""

    @app.exception_handler(CredentialError)
    async def handle_credential_error(request: Request, exc: CredentialError):
        # The cause is logged, never returned
        logger.info(
            f"Credential rejected: path={request.url.path}, reason={type(exc).__name__}"
        )
        return credentials_response()

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info(
            f"Credential for missing {exc.resource.lower()}: path={request.url.path}"
        )
        return credentials_response()

    @app.exception_handler(InvalidAssertionError)
    async def handle_invalid_assertion(request: Request, exc: InvalidAssertionError):
        logger.warning(f"Invalid assertion: path={request.url.path}, error={exc}")
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning(f"Conflict: path={request.url.path}, error={exc}")
        return _error_response(
            status.HTTP_409_CONFLICT, f"{exc.resource} already exists"
        )

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(
            f"Store unavailable: path={request.url.path}, store={exc.store}, "
            f"operation={exc.operation}"
        )
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Service temporarily unavailable",
            headers={"Retry-After": "1"},
        )

    @app.exception_handler(RevocationFailedError)
    async def handle_revocation_failed(request: Request, exc: RevocationFailedError):
        logger.error(f"Revocation incomplete: path={request.url.path}, step={exc.step}")
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Logout could not be completed, please retry",
            headers={"Retry-After": "1"},
        )

    @app.exception_handler(ProviderFailureError)
    async def handle_provider_failure(request: Request, exc: ProviderFailureError):
        logger.error(
            f"Identity provider failure: path={request.url.path}, "
            f"provider={exc.provider}, error={exc}"
        )
        return _error_response(
            status.HTTP_502_BAD_GATEWAY,
            f"Identity provider {exc.provider} is unavailable",
        )
