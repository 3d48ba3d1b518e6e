"""Application layer DI providers."""

from dishka import Scope, provide

from federation.application.usecase.auth import (
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokensUseCase,
)
from federation.domain.repository import IdentityLinkRepository
from federation.domain.service import AuthService, TokenLifecycleService
from federation.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        auth_service: AuthService,
        token_lifecycle_service: TokenLifecycleService,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            auth_service=auth_service,
            token_lifecycle_service=token_lifecycle_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_refresh_tokens_use_case(
        self, token_lifecycle_service: TokenLifecycleService
    ) -> RefreshTokensUseCase:
        """Provide refresh tokens use case."""
        return RefreshTokensUseCase(token_lifecycle_service=token_lifecycle_service)

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(
        self, token_lifecycle_service: TokenLifecycleService
    ) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(token_lifecycle_service=token_lifecycle_service)

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self,
        token_lifecycle_service: TokenLifecycleService,
        identity_link_repository: IdentityLinkRepository,
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(
            token_lifecycle_service=token_lifecycle_service,
            identity_link_repository=identity_link_repository,
        )
