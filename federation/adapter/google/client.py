"""Google OAuth client implementation."""

import httpx
import logfire

from federation.adapter.error import ProviderFailureError
from federation.domain.error import InvalidAssertionError
from federation.domain.service.auth_service import OAuthClient
from federation.domain.value import AuthProvider, ExternalIdentityAssertion


class GoogleOAuthClient(OAuthClient):
    """Base class for Google OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealGoogleOAuthClient(GoogleOAuthClient):
    """Google OpenID Connect client (authorization code flow)."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
    ) -> None:
        """Initialize Google OAuth client.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            redirect_uri: Callback URL registered with Google
            timeout: Seconds allowed for each provider request
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

        self.token_url = "https://oauth2.googleapis.com/token"
        self.user_info_url = "https://openidconnect.googleapis.com/v1/userinfo"

    async def complete_authorization(
        self, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Complete Google OAuth authorization flow.

        Args:
            code: Authorization code from Google callback
            state: State parameter (checked by the caller)

        Returns:
            Identity assertion for the Google account

        Raises:
            ProviderFailureError: If Google is unreachable or answers badly
            InvalidAssertionError: If the profile has no subject or no email
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
            },
        )
        access_token = tokens.get("access_token")
        if not access_token:
            raise ProviderFailureError("google", "Token response has no access_token")

        profile = await self._request(
            "GET",
            self.user_info_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if not profile.get("sub") or not profile.get("email"):
            logfire.warn(
                "Google profile missing required data",
                has_sub=bool(profile.get("sub")),
                has_email=bool(profile.get("email")),
            )
            raise InvalidAssertionError("Missing required user data from Google")

        name = profile.get("name") or " ".join(
            part for part in (profile.get("given_name"), profile.get("family_name")) if part
        )

        logfire.info("Google OAuth completed", sub=profile["sub"])

        return ExternalIdentityAssertion(
            provider=AuthProvider.GOOGLE,
            provider_subject_id=profile["sub"],
            email=profile["email"],
            name=name or None,
            avatar_url=profile.get("picture"),
            provider_access_token=access_token,
            provider_refresh_token=tokens.get("refresh_token"),
        )

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        """Send a request to Google and decode the JSON body.

        Raises:
            ProviderFailureError: If the request fails or the body is not JSON
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logfire.error("Google HTTP error", url=url, error=str(e))
            raise ProviderFailureError("google", f"HTTP error calling {url}: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Google request failed",
                url=url,
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderFailureError(
                "google", f"Request to {url} failed: {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderFailureError("google", f"Malformed response: {e}") from e


class MockGoogleOAuthClient(GoogleOAuthClient):
    """Mock Google OAuth client for testing."""

    def __init__(self):
        """Initialize mock client without real OAuth configuration."""
        pass

    async def complete_authorization(
        self, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Return mock user information."""
        return ExternalIdentityAssertion(
            provider=AuthProvider.GOOGLE,
            provider_subject_id="109876543210",
            email="mock@gmail.example.com",
            name="Mock Google User",
            avatar_url="https://example.com/google-avatar.png",
            provider_access_token="mock-google-access-token",
        )
