"""GitHub OAuth client implementation.

Completes the authorization code flow: exchanges the code for a provider
access token and reads the user's profile and primary email.
"""

import httpx
import logfire

from federation.adapter.error import ProviderFailureError
from federation.domain.error import InvalidAssertionError
from federation.domain.service.auth_service import OAuthClient
from federation.domain.value import AuthProvider, ExternalIdentityAssertion


class GitHubOAuthClient(OAuthClient):
    """Base class for GitHub OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealGitHubOAuthClient(GitHubOAuthClient):
    """GitHub OAuth App client."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
    ) -> None:
        """Initialize GitHub OAuth client.

        Args:
            client_id: GitHub OAuth client ID
            client_secret: GitHub OAuth client secret
            redirect_uri: Callback URL registered with GitHub
            timeout: Seconds allowed for each provider request
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

        # OAuth endpoints
        self.token_url = "https://github.com/login/oauth/access_token"
        self.user_info_url = "https://api.github.com/user"
        self.user_emails_url = "https://api.github.com/user/emails"

    async def complete_authorization(
        self, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Complete GitHub OAuth authorization flow.

        Args:
            code: Authorization code from GitHub callback
            state: State parameter echoed by GitHub

        Returns:
            Identity assertion for the GitHub user

        Raises:
            ProviderFailureError: If GitHub is unreachable or answers badly
            InvalidAssertionError: If the profile has no id or no email
        """
        tokens = await self._exchange_code_for_token(code, state)
        access_token = tokens["access_token"]

        user_info = await self._get_json(self.user_info_url, access_token)
        email = user_info.get("email") or await self._get_primary_email(access_token)

        if not user_info.get("id") or not email:
            logfire.warn(
                "GitHub profile missing required data",
                has_id=bool(user_info.get("id")),
                has_email=bool(email),
            )
            raise InvalidAssertionError("Missing required user data from GitHub")

        logfire.info(
            "GitHub OAuth completed",
            login=user_info.get("login"),
            user_id=user_info["id"],
        )

        return ExternalIdentityAssertion(
            provider=AuthProvider.GITHUB,
            provider_subject_id=user_info["id"],
            email=email,
            name=user_info.get("name") or user_info.get("login"),
            avatar_url=user_info.get("avatar_url"),
            provider_access_token=access_token,
            provider_refresh_token=tokens.get("refresh_token"),
        )

    async def _exchange_code_for_token(self, code: str, state: str) -> dict:
        """Exchange authorization code for access token.

        Raises:
            ProviderFailureError: If token exchange fails
        """
        data = {
            "code": code,
            "state": state,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logfire.error("GitHub token exchange HTTP error", error=str(e))
            raise ProviderFailureError(
                "github", f"HTTP error during token exchange: {e}"
            ) from e

        if response.status_code != 200:
            logfire.error(
                "GitHub token exchange failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderFailureError(
                "github", f"Token exchange failed: {response.status_code}"
            )

        result = _json(response)
        # GitHub reports bad codes with 200 and an "error" field
        if "access_token" not in result:
            logfire.error(
                "GitHub token exchange rejected",
                error=result.get("error"),
                description=result.get("error_description"),
            )
            raise ProviderFailureError(
                "github", f"Token exchange rejected: {result.get('error', 'unknown')}"
            )
        return result

    async def _get_primary_email(self, access_token: str) -> str | None:
        """Get the primary verified email of the user, if any."""
        emails = await self._get_json(self.user_emails_url, access_token, expected=list)
        if not all(isinstance(entry, dict) for entry in emails):
            raise ProviderFailureError("github", "Malformed response: expected email objects")

        for entry in emails:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None

    async def _get_json(self, url: str, access_token: str, expected: type = dict):
        """GET a GitHub API resource.

        Raises:
            ProviderFailureError: If the request fails
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    url,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/vnd.github+json",
                    },
                )
        except httpx.HTTPError as e:
            logfire.error("GitHub API HTTP error", url=url, error=str(e))
            raise ProviderFailureError("github", f"HTTP error fetching {url}: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "GitHub API request failed",
                url=url,
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderFailureError(
                "github", f"Request to {url} failed: {response.status_code}"
            )

        return _json(response, expected)


def _json(response: httpx.Response, expected: type = dict):
    try:
        body = response.json()
    except ValueError as e:
        raise ProviderFailureError("github", f"Malformed response: {e}") from e
    if not isinstance(body, expected):
        raise ProviderFailureError(
            "github", f"Malformed response: expected {expected.__name__}"
        )
    return body


class MockGitHubOAuthClient(GitHubOAuthClient):
    """Mock GitHub OAuth client for testing.

    Returns deterministic test data without making real API calls.
    """

    def __init__(self):
        """Initialize mock client without real OAuth configuration."""
        pass

    async def complete_authorization(
        self, code: str, state: str
    ) -> ExternalIdentityAssertion:
        """Return mock user information.

        Args:
            code: Authorization code (unused in mock)
            state: State parameter (unused in mock)

        Returns:
            Mock GitHub identity assertion
        """
        return ExternalIdentityAssertion(
            provider=AuthProvider.GITHUB,
            provider_subject_id="1234567",
            email="mock@github.example.com",
            name="Mock GitHub User",
            avatar_url="https://example.com/github-avatar.png",
            provider_access_token="mock-github-access-token",
        )
