"""Refresh tokens use case."""

from pydantic import BaseModel

from federation.application.usecase.base import BaseUseCase
from federation.domain.service import IssuedCredentials, TokenLifecycleService


class RefreshTokensRequest(BaseModel):
    """Refresh tokens request."""

    refresh_token: str


class RefreshTokensUseCase(
    BaseUseCase[RefreshTokensRequest, IssuedCredentials]
):
    """Use case for exchanging a refresh token for a fresh pair."""

    def __init__(self, token_lifecycle_service: TokenLifecycleService) -> None:
        self.token_lifecycle_service = token_lifecycle_service

    async def execute(self, request: RefreshTokensRequest) -> IssuedCredentials:
        """Execute refresh flow.

        Raises:
            CredentialError: If the refresh token is invalid, expired or revoked
            UserNotFoundError: If the user no longer exists
        """
        return await self.token_lifecycle_service.refresh(request.refresh_token)
