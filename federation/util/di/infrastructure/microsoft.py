"""Microsoft infrastructure providers."""

from dishka import Scope, provide

from federation.adapter.microsoft.client import (
    MicrosoftOAuthClient,
    RealMicrosoftOAuthClient,
)
from federation.config import Settings
from federation.util.di.base import ProviderBase


class MicrosoftProvider(ProviderBase):
    """Microsoft component base."""

    __mock_component__ = "microsoft"


class ProdMicrosoftProvider(MicrosoftProvider):
    """Production Microsoft provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_microsoft_oauth_client(self, settings: Settings) -> MicrosoftOAuthClient:
        """Provide Microsoft OAuth client.

        Raises:
            ValueError: If Microsoft OAuth credentials are not configured
        """
        microsoft = settings.providers.microsoft
        if not microsoft.client_id:
            raise ValueError("Microsoft OAuth client ID must be configured")
        if not microsoft.client_secret:
            raise ValueError("Microsoft OAuth client secret must be configured")

        return RealMicrosoftOAuthClient(
            client_id=microsoft.client_id,
            client_secret=microsoft.client_secret,
            redirect_uri=microsoft.callback_url,
            tenant_id=microsoft.tenant_id,
            timeout=microsoft.timeout,
        )
