"""GitHub infrastructure providers."""

from dishka import Scope, provide

from federation.adapter.github.client import GitHubOAuthClient, RealGitHubOAuthClient
from federation.config import Settings
from federation.util.di.base import ProviderBase


class GitHubProvider(ProviderBase):
    """GitHub component base."""

    __mock_component__ = "github"


class ProdGitHubProvider(GitHubProvider):
    """Production GitHub provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_github_oauth_client(self, settings: Settings) -> GitHubOAuthClient:
        """Provide GitHub OAuth client.

        Raises:
            ValueError: If GitHub OAuth credentials are not configured
        """
        github = settings.providers.github
        if not github.client_id:
            raise ValueError("GitHub OAuth client ID must be configured")
        if not github.client_secret:
            raise ValueError("GitHub OAuth client secret must be configured")

        return RealGitHubOAuthClient(
            client_id=github.client_id,
            client_secret=github.client_secret,
            redirect_uri=github.callback_url,
            timeout=github.timeout,
        )
