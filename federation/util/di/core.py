"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from federation.config import (
    ResolverSettings,
    RevocationSettings,
    SessionSettings,
    Settings,
    TokenSettings,
)
from federation.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_token_settings(self, settings: Settings) -> TokenSettings:
        """Provide token settings."""
        return settings.tokens

    @provide(scope=Scope.APP)
    def provide_session_settings(self, settings: Settings) -> SessionSettings:
        """Provide session cache settings."""
        return settings.session

    @provide(scope=Scope.APP)
    def provide_revocation_settings(self, settings: Settings) -> RevocationSettings:
        """Provide revocation settings."""
        return settings.revocation

    @provide(scope=Scope.APP)
    def provide_resolver_settings(self, settings: Settings) -> ResolverSettings:
        """Provide identity resolution settings."""
        return settings.resolver
