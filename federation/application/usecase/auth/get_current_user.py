"""Get current user use case."""

from pydantic import BaseModel

from federation.application.usecase.base import BaseUseCase
from federation.domain.repository import IdentityLinkRepository
from federation.domain.service import TokenLifecycleService
from federation.domain.value import AuthProvider


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str  # Access token


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    id: str
    email: str
    name: str
    avatar_url: str | None
    providers: list[AuthProvider]


class GetCurrentUserUseCase(
    BaseUseCase[GetCurrentUserRequest, GetCurrentUserResponse]
):
    """Use case for getting current authenticated user."""

    def __init__(
        self,
        token_lifecycle_service: TokenLifecycleService,
        identity_link_repository: IdentityLinkRepository,
    ) -> None:
        """Initialize get current user use case.

        Args:
            token_lifecycle_service: Authenticates access tokens
            identity_link_repository: Lists the user's linked providers
        """
        self.token_lifecycle_service = token_lifecycle_service
        self.identity_link_repository = identity_link_repository

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Execute get current user flow.

        Raises:
            CredentialError: If token is invalid, expired or revoked
            UserNotFoundError: If user not found
        """
        claims = await self.token_lifecycle_service.authenticate(request.token)
        user = await self.token_lifecycle_service.current_user(claims.user_id)
        links = await self.identity_link_repository.find_all_by_user_id(claims.user_id)

        return GetCurrentUserResponse(
            id=user.id,
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
            providers=[link.provider for link in links],
        )
