"""OAuth infrastructure provider for multi-provider authentication."""

from dishka import Scope, provide

from federation.adapter.github.client import GitHubOAuthClient
from federation.adapter.google.client import GoogleOAuthClient
from federation.adapter.microsoft.client import MicrosoftOAuthClient
from federation.domain.service.auth_service import OAuthClient
from federation.domain.value import AuthProvider
from federation.util.di.base import ProviderBase


class OAuthAggregatorProvider(ProviderBase):
    """Provider that aggregates all OAuth clients into a dictionary."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self,
        github_oauth_client: GitHubOAuthClient,
        google_oauth_client: GoogleOAuthClient,
        microsoft_oauth_client: MicrosoftOAuthClient,
    ) -> dict[AuthProvider, OAuthClient]:
        """Provide dictionary of all OAuth clients by provider.

        Args:
            github_oauth_client: GitHub OAuth client (specific type)
            google_oauth_client: Google OAuth client (specific type)
            microsoft_oauth_client: Microsoft OAuth client (specific type)

        Returns:
            Dictionary mapping AuthProvider to OAuthClient
        """
        return {
            AuthProvider.GITHUB: github_oauth_client,
            AuthProvider.GOOGLE: google_oauth_client,
            AuthProvider.MICROSOFT: microsoft_oauth_client,
        }
