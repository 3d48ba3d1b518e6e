"""Microsoft identity platform OAuth client implementation.

Exchanges the authorization code at the tenant's v2.0 token endpoint and
reads the signed-in user from Microsoft Graph.
"""

import httpx
import logfire

from federation.adapter.error import ProviderFailureError
from federation.domain.error import InvalidAssertionError
from federation.domain.service.auth_service import OAuthClient
from federation.domain.value import AuthProvider, ExternalIdentityAssertion

SCOPES = [
    "https://graph.microsoft.com/User.Read",
    "openid",
    "profile",
    "email",
    "offline_access",
]


class MicrosoftOAuthClient(OAuthClient):
    """Base class for Microsoft OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealMicrosoftOAuthClient(MicrosoftOAuthClient):
    """Microsoft Entra ID client (authorization code flow)."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        tenant_id: str = "common",
        timeout: float = 10.0,
    ) -> None:
        """Initialize Microsoft OAuth client.

        Args:
            client_id: Application (client) ID
            client_secret: Client secret of the app registration
            redirect_uri: Callback URL registered with the app
            tenant_id: Directory id, or "common" / "organizations" / "consumers"
            timeout: Seconds allowed for each provider request
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.tenant_id = tenant_id
        self.timeout = timeout

        self.token_url = (
            f"https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
        )
        self.user_info_url = "https://graph.microsoft.com/v1.0/me"

    async def complete_authorization(
        self, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Complete Microsoft OAuth authorization flow.

        The email comes from ``mail`` and falls back to ``userPrincipalName``,
        which is the only address accounts without a mailbox have.

        Args:
            code: Authorization code from the Microsoft callback
            state: State parameter (checked by the caller)

        Returns:
            Identity assertion for the Microsoft account

        Raises:
            ProviderFailureError: If Microsoft is unreachable or answers badly
            InvalidAssertionError: If the profile has no id or no email
        """
        _ = state
        tokens = await self._request(
            "POST",
            self.token_url,
            data={
                "code": code,
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "scope": " ".join(SCOPES),
            },
        )
        access_token = tokens.get("access_token")
        if not access_token:
            logfire.error(
                "Microsoft token exchange rejected",
                error=tokens.get("error"),
                description=tokens.get("error_description"),
            )
            raise ProviderFailureError("microsoft", "Token response has no access_token")

        profile = await self._request(
            "GET",
            self.user_info_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )

        email = profile.get("mail") or profile.get("userPrincipalName")
        if not profile.get("id") or not email:
            logfire.warn(
                "Microsoft profile missing required data",
                has_id=bool(profile.get("id")),
                has_email=bool(email),
            )
            raise InvalidAssertionError("Missing required user data from Microsoft")

        name = profile.get("displayName") or " ".join(
            part for part in (profile.get("givenName"), profile.get("surname")) if part
        )

        logfire.info("Microsoft OAuth completed", user_id=profile["id"])

        return ExternalIdentityAssertion(
            provider=AuthProvider.MICROSOFT,
            provider_subject_id=profile["id"],
            email=email,
            name=name or None,
            provider_access_token=access_token,
            provider_refresh_token=tokens.get("refresh_token"),
        )

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        """Send a request to Microsoft and decode the JSON object body.

        Raises:
            ProviderFailureError: If the request fails or the body is not a
                JSON object
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logfire.error("Microsoft HTTP error", url=url, error=str(e))
            raise ProviderFailureError(
                "microsoft", f"HTTP error calling {url}: {e}"
            ) from e

        if response.status_code != 200:
            logfire.error(
                "Microsoft request failed",
                url=url,
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderFailureError(
                "microsoft", f"Request to {url} failed: {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderFailureError("microsoft", f"Malformed response: {e}") from e
        if not isinstance(body, dict):
            raise ProviderFailureError("microsoft", "Malformed response: expected dict")
        return body


class MockMicrosoftOAuthClient(MicrosoftOAuthClient):
    """Mock Microsoft OAuth client for testing."""

    def __init__(self):
        """Initialize mock client without real OAuth configuration."""
        pass

    async def complete_authorization(
        self, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Return mock user information."""
        return ExternalIdentityAssertion(
            provider=AuthProvider.MICROSOFT,
            provider_subject_id="6f1c2a4e-0b7d-4c1e-9a53-1d2e3f4a5b6c",
            email="mock@outlook.example.com",
            name="Mock Microsoft User",
            provider_access_token="mock-microsoft-access-token",
        )
