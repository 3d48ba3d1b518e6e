"""Unit tests for the Microsoft OAuth client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from federation.adapter.error import ProviderFailureError
from federation.adapter.microsoft import (
    MockMicrosoftOAuthClient,
    RealMicrosoftOAuthClient,
)
from federation.domain.error import InvalidAssertionError
from federation.domain.value import AuthProvider

TOKEN_RESPONSE = {
    "token_type": "Bearer",
    "access_token": "eyJ0eXAi.graph",
    "refresh_token": "0.AAAA-refresh",
    "expires_in": 3599,
}
GRAPH_ME = {
    "id": "87d349ed-44d7-43e1-9a83-5f2406dee5bd",
    "displayName": "Adele Vance",
    "givenName": "Adele",
    "surname": "Vance",
    "mail": "AdeleV@contoso.com",
    "userPrincipalName": "adelev@contoso.onmicrosoft.com",
}


@pytest.fixture
def microsoft_client():
    return RealMicrosoftOAuthClient(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:8000/auth/callback/microsoft",
        tenant_id="contoso.onmicrosoft.com",
        timeout=3.0,
    )


@pytest.fixture
def http():
    """Patch httpx.AsyncClient inside the Microsoft client module."""
    client = AsyncMock()
    with patch("federation.adapter.microsoft.client.httpx.AsyncClient") as factory:
        factory.return_value.__aenter__.return_value = client
        factory.return_value.__aexit__.return_value = False
        client.factory = factory
        yield client


class TestCompleteAuthorization:
    """Tests for complete_authorization method."""

    @pytest.mark.asyncio
    async def test_builds_assertion_from_graph_profile(self, microsoft_client, http):
        """Should exchange the code at the tenant endpoint and read Graph /me."""
        http.request.side_effect = [
            httpx.Response(200, json=TOKEN_RESPONSE),
            httpx.Response(200, json=GRAPH_ME),
        ]

        assertion = await microsoft_client.complete_authorization("code-1", "state-1")

        assert assertion.provider is AuthProvider.MICROSOFT
        assert assertion.provider_subject_id == GRAPH_ME["id"]
        assert assertion.email == "adelev@contoso.com"
        assert assertion.name == "Adele Vance"
        assert assertion.avatar_url is None
        assert assertion.provider_refresh_token == "0.AAAA-refresh"

        token_call, me_call = http.request.call_args_list
        assert token_call.args == (
            "POST",
            "https://login.microsoftonline.com/contoso.onmicrosoft.com/oauth2/v2.0/token",
        )
        assert token_call.kwargs["data"]["grant_type"] == "authorization_code"
        assert "https://graph.microsoft.com/User.Read" in token_call.kwargs["data"]["scope"]
        assert me_call.args == ("GET", "https://graph.microsoft.com/v1.0/me")
        assert me_call.kwargs["headers"]["Authorization"] == "Bearer eyJ0eXAi.graph"
        http.factory.assert_called_with(timeout=3.0)

    @pytest.mark.asyncio
    async def test_email_falls_back_to_user_principal_name(self, microsoft_client, http):
        """Accounts without a mailbox only have a userPrincipalName."""
        http.request.side_effect = [
            httpx.Response(200, json=TOKEN_RESPONSE),
            httpx.Response(200, json={**GRAPH_ME, "mail": None}),
        ]

        assertion = await microsoft_client.complete_authorization("code", "state")

        assert assertion.email == "adelev@contoso.onmicrosoft.com"

    @pytest.mark.asyncio
    async def test_name_built_from_given_name_and_surname(self, microsoft_client, http):
        http.request.side_effect = [
            httpx.Response(200, json=TOKEN_RESPONSE),
            httpx.Response(200, json={**GRAPH_ME, "displayName": None}),
        ]

        assertion = await microsoft_client.complete_authorization("code", "state")

        assert assertion.name == "Adele Vance"

    @pytest.mark.asyncio
    async def test_missing_email(self, microsoft_client, http):
        http.request.side_effect = [
            httpx.Response(200, json=TOKEN_RESPONSE),
            httpx.Response(200, json={"id": "1", "displayName": "No Mail"}),
        ]

        with pytest.raises(InvalidAssertionError):
            await microsoft_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    async def test_rejected_code(self, microsoft_client, http):
        http.request.return_value = httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "AADSTS70008"}
        )

        with pytest.raises(ProviderFailureError, match="400") as exc_info:
            await microsoft_client.complete_authorization("code", "state")

        assert exc_info.value.provider == "microsoft"

    @pytest.mark.asyncio
    async def test_token_response_without_access_token(self, microsoft_client, http):
        http.request.return_value = httpx.Response(200, json={"token_type": "Bearer"})

        with pytest.raises(ProviderFailureError):
            await microsoft_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    async def test_profile_body_not_an_object(self, microsoft_client, http):
        http.request.side_effect = [
            httpx.Response(200, json=TOKEN_RESPONSE),
            httpx.Response(200, json=["unexpected"]),
        ]

        with pytest.raises(ProviderFailureError, match="Malformed"):
            await microsoft_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    async def test_timeout(self, microsoft_client, http):
        http.request.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(ProviderFailureError):
            await microsoft_client.complete_authorization("code", "state")

    def test_default_tenant_is_common(self):
        client = RealMicrosoftOAuthClient("id", "secret", "http://localhost/cb")

        assert client.token_url == (
            "https://login.microsoftonline.com/common/oauth2/v2.0/token"
        )


class TestMockMicrosoftOAuthClient:
    """Tests for the mock client used by the test container."""

    @pytest.mark.asyncio
    async def test_returns_deterministic_assertion(self):
        client = MockMicrosoftOAuthClient()

        first = await client.complete_authorization("a", "b")
        second = await client.complete_authorization("c", "d")

        assert first == second
        assert first.provider is AuthProvider.MICROSOFT
