"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from federation.config import Settings
from federation.domain.error import StoreUnavailableError
from federation.domain.repository import SessionStore

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    session_store: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    session_store: FromDishka[SessionStore],
) -> HealthResponse:
    """Health check endpoint.

    Reports "degraded" when the session store cannot be reached: logins
    still work but revocation does not.
    """
    try:
        store_ok = await session_store.ping()
    except StoreUnavailableError:
        store_ok = False

    return HealthResponse(
        status="healthy" if store_ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        session_store="ok" if store_ok else "unavailable",
    )
