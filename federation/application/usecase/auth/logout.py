"""Logout use case."""

from pydantic import BaseModel

from federation.application.usecase.base import BaseUseCase
from federation.domain.service import TokenLifecycleService


class LogoutRequest(BaseModel):
    """Logout request."""

    access_token: str
    refresh_token: str | None = None


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class LogoutUseCase(BaseUseCase[LogoutRequest, LogoutResponse]):
    """Use case for revoking the caller's session."""

    def __init__(self, token_lifecycle_service: TokenLifecycleService) -> None:
        self.token_lifecycle_service = token_lifecycle_service

    async def execute(self, request: LogoutRequest) -> LogoutResponse:
        """Execute logout flow.

        Steps:
        1. Verify the access token (an already revoked token is accepted, so
           a logout interrupted by a store outage can be retried)
        2. Revoke the session: blacklist tokens, drop session and cached pair

        Args:
            request: Tokens presented by the caller

        Returns:
            Logout confirmation

        Raises:
            CredentialError: If the access token is invalid or expired
            RevocationFailedError: If revocation could not be completed
        """
        claims = self.token_lifecycle_service.identify(request.access_token)
        await self.token_lifecycle_service.revoke(
            claims.user_id, request.access_token, request.refresh_token
        )
        return LogoutResponse(success=True, message="Successfully logged out")
