"""Authentication routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from federation.application.usecase.auth import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
    LoginRequest,
    LoginUseCase,
    LogoutRequest,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokensRequest,
    RefreshTokensUseCase,
)
from federation.domain.error import MalformedTokenError, UnsupportedProviderError
from federation.domain.service import IssuedCredentials
from federation.domain.value import AuthProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

bearer_scheme = HTTPBearer(auto_error=False)


class CallbackRequest(BaseModel):
    """OAuth callback parameters forwarded by the client."""

    code: str
    state: str


class LogoutBody(BaseModel):
    """Optional refresh token to revoke along with the access token."""

    refresh_token: str | None = None


def bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Extract the bearer token, rejecting requests without one."""
    if credentials is None or not credentials.credentials:
        raise MalformedTokenError("Missing bearer token")
    return credentials.credentials


@router.post("/callback/{provider}", response_model=IssuedCredentials)
async def oauth_callback(
    provider: str,
    request: CallbackRequest,
    login_use_case: FromDishka[LoginUseCase],
) -> IssuedCredentials:
    """Complete an OAuth login and issue local credentials.

    Example:
        POST /auth/callback/github
        {"code": "abc123", "state": "xyz789"}

        Response:
        {
            "access_token": "...",
            "refresh_token": "...",
            "expires_in": 900,
            "user": {"id": "...", "email": "...", "name": "...", "avatar_url": null}
        }
    """
    try:
        auth_provider = AuthProvider(provider)
    except ValueError:
        raise UnsupportedProviderError(provider) from None

    logger.info(f"OAuth callback received: provider={auth_provider.value}")
    credentials = await login_use_case.execute(
        LoginRequest(provider=auth_provider, code=request.code, state=request.state)
    )
    logger.info(f"Login successful for user: {credentials.user.id}")
    return credentials


@router.post("/refresh", response_model=IssuedCredentials)
async def refresh(
    request: RefreshTokensRequest,
    refresh_tokens_use_case: FromDishka[RefreshTokensUseCase],
) -> IssuedCredentials:
    """Exchange a refresh token for a fresh token pair."""
    return await refresh_tokens_use_case.execute(request)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    logout_use_case: FromDishka[LogoutUseCase],
    access_token: str = Depends(bearer_token),
    body: LogoutBody | None = None,
) -> LogoutResponse:
    """Revoke the caller's session.

    The access token (and the refresh token, if sent) stay rejected until
    they would have expired.
    """
    return await logout_use_case.execute(
        LogoutRequest(
            access_token=access_token,
            refresh_token=body.refresh_token if body else None,
        )
    )


@router.get("/me", response_model=GetCurrentUserResponse)
async def get_current_user(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    access_token: str = Depends(bearer_token),
) -> GetCurrentUserResponse:
    """Get the authenticated user."""
    return await get_current_user_use_case.execute(
        GetCurrentUserRequest(token=access_token)
    )
