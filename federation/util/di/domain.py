"""Domain layer DI providers."""

from dishka import Scope, provide

from federation.config import (
    ResolverSettings,
    RevocationSettings,
    SessionSettings,
    TokenSettings,
)
from federation.domain.repository import (
    IdentityLinkRepository,
    SessionStore,
    UserRepository,
)
from federation.domain.service import (
    AuthService,
    CredentialCodec,
    EventPublisher,
    IdentityResolver,
    OAuthClient,
    SideEffectRunner,
    TokenLifecycleService,
    UserEventService,
)
from federation.domain.value import AuthProvider
from federation.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Services that touch repositories are REQUEST-scoped to align with the
    database session lifecycle; stateless services live for the app.
    """

    scope = Scope.REQUEST

    @provide
    def get_auth_service(
        self, oauth_clients: dict[AuthProvider, OAuthClient]
    ) -> AuthService:
        """Provide multi-provider authentication domain service.

        Args:
            oauth_clients: Dictionary mapping providers to their OAuth clients

        Returns:
            AuthService configured with all available OAuth clients
        """
        return AuthService(oauth_clients=oauth_clients)

    @provide(scope=Scope.APP)
    def get_credential_codec(self, token_settings: TokenSettings) -> CredentialCodec:
        """Provide credential codec."""
        return CredentialCodec(token_settings=token_settings)

    @provide(scope=Scope.APP)
    def get_side_effect_runner(
        self, revocation_settings: RevocationSettings
    ) -> SideEffectRunner:
        """Provide side effect runner."""
        return SideEffectRunner(retry_attempts=revocation_settings.retry_attempts)

    @provide(scope=Scope.APP)
    def get_user_event_service(self, publisher: EventPublisher) -> UserEventService:
        """Provide user lifecycle event service."""
        return UserEventService(publisher=publisher)

    @provide
    def get_identity_resolver(
        self,
        user_repository: UserRepository,
        identity_link_repository: IdentityLinkRepository,
        resolver_settings: ResolverSettings,
    ) -> IdentityResolver:
        """Provide identity resolver."""
        return IdentityResolver(
            user_repository=user_repository,
            identity_link_repository=identity_link_repository,
            max_attempts=resolver_settings.max_attempts,
        )

    @provide
    def get_token_lifecycle_service(
        self,
        identity_resolver: IdentityResolver,
        credential_codec: CredentialCodec,
        session_store: SessionStore,
        user_repository: UserRepository,
        user_event_service: UserEventService,
        side_effects: SideEffectRunner,
        session_settings: SessionSettings,
        revocation_settings: RevocationSettings,
        token_settings: TokenSettings,
    ) -> TokenLifecycleService:
        """Provide token lifecycle service."""
        return TokenLifecycleService(
            identity_resolver=identity_resolver,
            credential_codec=credential_codec,
            session_store=session_store,
            user_repository=user_repository,
            user_event_service=user_event_service,
            side_effects=side_effects,
            session_settings=session_settings,
            revocation_settings=revocation_settings,
            refresh_rotation=token_settings.refresh_rotation,
        )
