"""Login use case."""

import logfire
from pydantic import BaseModel

from federation.application.usecase.base import BaseUseCase
from federation.domain.service import (
    AuthService,
    IssuedCredentials,
    TokenLifecycleService,
)
from federation.domain.value import AuthProvider, ExternalIdentityAssertion


class LoginRequest(BaseModel):
    """Login request from OAuth callback.

    These parameters come from the OAuth provider in the callback URL.
    """

    provider: AuthProvider  # Which provider is handling this login
    code: str  # OAuth authorization code
    state: str  # State parameter echoed by the provider


class LoginUseCase(BaseUseCase[LoginRequest, IssuedCredentials]):
    """Use case for multi-provider user login via OAuth."""

    def __init__(
        self,
        auth_service: AuthService,
        token_lifecycle_service: TokenLifecycleService,
    ) -> None:
        """Initialize login use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            token_lifecycle_service: Issues local credentials
        """
        self.auth_service = auth_service
        self.token_lifecycle_service = token_lifecycle_service

    async def execute(self, request: LoginRequest) -> IssuedCredentials:
        """Execute multi-provider login flow.

        Steps:
        1. Complete OAuth flow with provider and get an identity assertion
        2. Resolve the assertion to a local user (find, link or create)
        3. Issue an access/refresh pair and publish the lifecycle event

        Args:
            request: Login request with OAuth callback parameters

        Returns:
            Issued credentials with user summary

        Raises:
            UnsupportedProviderError: If the provider is not configured
            ProviderFailureError: If the provider exchange fails
            InvalidAssertionError: If the provider omitted subject id or email
        """
        assertion = await self.auth_service.complete_login(
            request.provider, request.code, request.state
        )
        return await self.login_with_assertion(assertion)

    async def login_with_assertion(
        self, assertion: ExternalIdentityAssertion
    ) -> IssuedCredentials:
        """Issue credentials for an assertion obtained elsewhere."""
        with logfire.span("login_user", provider=assertion.provider.value):
            return await self.token_lifecycle_service.issue_for_assertion(assertion)
