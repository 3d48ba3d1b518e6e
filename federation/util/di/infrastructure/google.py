"""Google infrastructure providers."""

from dishka import Scope, provide

from federation.adapter.google.client import GoogleOAuthClient, RealGoogleOAuthClient
from federation.config import Settings
from federation.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_oauth_client(self, settings: Settings) -> GoogleOAuthClient:
        """Provide Google OAuth client.

        Raises:
            ValueError: If Google OAuth credentials are not configured
        """
        google = settings.providers.google
        if not google.client_id:
            raise ValueError("Google OAuth client ID must be configured")
        if not google.client_secret:
            raise ValueError("Google OAuth client secret must be configured")

        return RealGoogleOAuthClient(
            client_id=google.client_id,
            client_secret=google.client_secret,
            redirect_uri=google.callback_url,
            timeout=google.timeout,
        )
