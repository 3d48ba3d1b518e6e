"""Unit tests for the GitHub OAuth client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from federation.adapter.error import ProviderFailureError
from federation.adapter.github import MockGitHubOAuthClient, RealGitHubOAuthClient
from federation.domain.error import InvalidAssertionError
from federation.domain.value import AuthProvider

TOKEN_RESPONSE = {"access_token": "gho_abc", "token_type": "bearer", "scope": "user:email"}
PROFILE = {
    "id": 583231,
    "login": "octocat",
    "name": "The Octocat",
    "email": "Octocat@GitHub.com",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231",
}


@pytest.fixture
def github_client():
    return RealGitHubOAuthClient(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:8000/auth/callback/github",
    )


@pytest.fixture
def http():
    """Patch httpx.AsyncClient inside the GitHub client module."""
    client = AsyncMock()
    with patch("federation.adapter.github.client.httpx.AsyncClient") as factory:
        factory.return_value.__aenter__.return_value = client
        factory.return_value.__aexit__.return_value = False
        yield client


class TestCompleteAuthorization:
    """Tests for complete_authorization method."""

    @pytest.mark.asyncio
    async def test_builds_assertion_from_profile(self, github_client, http):
        """Should exchange the code and normalize the profile."""
        http.post.return_value = httpx.Response(200, json=TOKEN_RESPONSE)
        http.get.return_value = httpx.Response(200, json=PROFILE)

        assertion = await github_client.complete_authorization("code-1", "state-1")

        assert assertion.provider is AuthProvider.GITHUB
        assert assertion.provider_subject_id == "583231"
        assert assertion.email == "octocat@github.com"
        assert assertion.name == "The Octocat"
        assert assertion.avatar_url == PROFILE["avatar_url"]
        assert assertion.provider_access_token == "gho_abc"

        post_kwargs = http.post.call_args.kwargs
        assert post_kwargs["data"]["code"] == "code-1"
        assert post_kwargs["data"]["client_secret"] == "client-secret"
        assert post_kwargs["headers"]["Accept"] == "application/json"
        assert http.get.call_args.kwargs["headers"]["Authorization"] == "Bearer gho_abc"

    @pytest.mark.asyncio
    async def test_private_email_falls_back_to_primary_verified(self, github_client, http):
        """Should read /user/emails when the profile hides the email."""
        http.post.return_value = httpx.Response(200, json=TOKEN_RESPONSE)
        http.get.side_effect = [
            httpx.Response(200, json={**PROFILE, "email": None, "name": None}),
            httpx.Response(
                200,
                json=[
                    {"email": "old@example.com", "primary": False, "verified": True},
                    {"email": "octo@example.com", "primary": True, "verified": True},
                ],
            ),
        ]

        assertion = await github_client.complete_authorization("code", "state")

        assert assertion.email == "octo@example.com"
        assert assertion.name == "octocat"
        assert http.get.call_args.args[0] == "https://api.github.com/user/emails"

    @pytest.mark.asyncio
    async def test_no_usable_email(self, github_client, http):
        http.post.return_value = httpx.Response(200, json=TOKEN_RESPONSE)
        http.get.side_effect = [
            httpx.Response(200, json={**PROFILE, "email": None}),
            httpx.Response(
                200,
                json=[{"email": "octo@example.com", "primary": True, "verified": False}],
            ),
        ]

        with pytest.raises(InvalidAssertionError):
            await github_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    async def test_bad_code_reported_with_200(self, github_client, http):
        """GitHub answers 200 with an error field for bad codes."""
        http.post.return_value = httpx.Response(
            200,
            json={"error": "bad_verification_code", "error_description": "expired"},
        )

        with pytest.raises(ProviderFailureError, match="bad_verification_code"):
            await github_client.complete_authorization("code", "state")

        http.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_token_endpoint_error_status(self, github_client, http):
        http.post.return_value = httpx.Response(500, text="oops")

        with pytest.raises(ProviderFailureError) as exc_info:
            await github_client.complete_authorization("code", "state")

        assert exc_info.value.provider == "github"

    @pytest.mark.asyncio
    async def test_network_error(self, github_client, http):
        http.post.side_effect = httpx.ConnectTimeout("timed out")

        with pytest.raises(ProviderFailureError):
            await github_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    async def test_malformed_profile_body(self, github_client, http):
        http.post.return_value = httpx.Response(200, json=TOKEN_RESPONSE)
        http.get.return_value = httpx.Response(200, content=b"<html>")

        with pytest.raises(ProviderFailureError, match="Malformed"):
            await github_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "emails_body",
        [
            {"email": "octo@example.com", "primary": True, "verified": True},
            ["octo@example.com"],
        ],
    )
    async def test_malformed_emails_body(self, github_client, http, emails_body):
        """An unexpected /user/emails shape is a provider failure."""
        http.post.return_value = httpx.Response(200, json=TOKEN_RESPONSE)
        http.get.side_effect = [
            httpx.Response(200, json={**PROFILE, "email": None}),
            httpx.Response(200, json=emails_body),
        ]

        with pytest.raises(ProviderFailureError, match="Malformed") as exc_info:
            await github_client.complete_authorization("code", "state")

        assert exc_info.value.provider == "github"

    @pytest.mark.asyncio
    async def test_profile_body_not_an_object(self, github_client, http):
        http.post.return_value = httpx.Response(200, json=TOKEN_RESPONSE)
        http.get.return_value = httpx.Response(200, json=["not", "a", "profile"])

        with pytest.raises(ProviderFailureError, match="expected dict"):
            await github_client.complete_authorization("code", "state")


class TestMockGitHubOAuthClient:
    """Tests for the mock client used by the test container."""

    @pytest.mark.asyncio
    async def test_returns_deterministic_assertion(self):
        client = MockGitHubOAuthClient()

        first = await client.complete_authorization("a", "b")
        second = await client.complete_authorization("c", "d")

        assert first == second
        assert first.missing_fields() == []
