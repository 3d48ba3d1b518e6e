"""Authentication domain service."""

import logfire

from federation.domain.error import UnsupportedProviderError
from federation.domain.value import AuthProvider, ExternalIdentityAssertion

from .base import Service


class OAuthClient:
    """Generic OAuth client interface for all providers."""

    async def complete_authorization(
        self, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Complete OAuth authorization flow.

        Args:
            code: Authorization code from OAuth callback
            state: State parameter echoed by the provider

        Returns:
            Normalized identity assertion

        Raises:
            ProviderFailureError: If the provider is unreachable or returns
                malformed data
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service for multi-provider authentication operations.

    Turns provider callbacks into identity assertions.
    """

    def __init__(self, oauth_clients: dict[AuthProvider, OAuthClient]) -> None:
        """Initialize auth service.

        Args:
            oauth_clients: Map of provider to OAuth client implementation
        """
        self.oauth_clients = oauth_clients

    async def complete_login(
        self, provider: AuthProvider, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Complete OAuth login flow for any provider.

        Args:
            provider: Identity provider used
            code: Authorization code from OAuth callback
            state: State parameter

        Returns:
            Identity assertion from the provider

        Raises:
            UnsupportedProviderError: If no client is configured for provider
        """
        client = self.oauth_clients.get(provider)
        if not client:
            raise UnsupportedProviderError(provider.value)

        with logfire.span("auth_service.complete_login", provider=provider.value):
            assertion = await client.complete_authorization(code, state)
            logfire.info(
                "OAuth completed",
                provider=provider.value,
                provider_subject_id=assertion.provider_subject_id,
            )
            return assertion
