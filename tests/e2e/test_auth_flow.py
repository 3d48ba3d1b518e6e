"""End-to-end tests for the authentication flow."""

import pytest
from dishka import Provider, Scope, provide
from dishka.integrations.fastapi import FastapiProvider
from fastapi.testclient import TestClient

from federation.domain.repository import SessionStore
from federation.domain.repository.session_store import session_key, token_key
from federation.interface.api.app import create_app
from federation.interface.api.error_handlers import CREDENTIALS_DETAIL
from federation.persistence.cache import InMemorySessionStore
from tests.di import build_test_container


class SessionStoreOverride(Provider):
    """Hands the test's own session store to the app."""

    def __init__(self, store: InMemorySessionStore) -> None:
        super().__init__()
        self.store = store

    @provide(scope=Scope.APP)
    def get_session_store(self) -> SessionStore:
        return self.store


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def client(session_store):
    """Create test client backed by a fully mocked container."""
    container = build_test_container(
        extra_providers=[FastapiProvider(), SessionStoreOverride(session_store)]
    )
    with TestClient(create_app(container)) as test_client:
        yield test_client


def login(client, provider: str = "github") -> dict:
    response = client.post(
        f"/auth/callback/{provider}", json={"code": "abc123", "state": "xyz789"}
    )
    assert response.status_code == 200
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestLogin:
    """OAuth callback issues local credentials."""

    def test_github_callback(self, client):
        """Should create the user and return a token pair."""
        # Act
        data = login(client, "github")

        # Assert
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["expires_in"] > 0
        assert data["user"]["email"] == "mock@github.example.com"
        assert data["user"]["name"] == "Mock GitHub User"

    def test_google_callback_creates_separate_user(self, client):
        github = login(client, "github")
        google = login(client, "google")

        assert google["user"]["email"] == "mock@gmail.example.com"
        assert google["user"]["id"] != github["user"]["id"]

    def test_microsoft_callback(self, client):
        data = login(client, "microsoft")

        assert data["user"]["email"] == "mock@outlook.example.com"
        assert data["user"]["name"] == "Mock Microsoft User"

    def test_repeat_login_keeps_user(self, client):
        first = login(client)
        second = login(client)

        assert first["user"]["id"] == second["user"]["id"]

    def test_unknown_provider(self, client):
        response = client.post(
            "/auth/callback/gitlab", json={"code": "abc", "state": "xyz"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported provider: gitlab"

    def test_missing_code(self, client):
        response = client.post("/auth/callback/github", json={"state": "xyz"})

        assert response.status_code == 422


class TestCurrentUser:
    """GET /auth/me."""

    def test_me(self, client):
        data = login(client)

        response = client.get("/auth/me", headers=bearer(data["access_token"]))

        assert response.status_code == 200
        me = response.json()
        assert me["id"] == data["user"]["id"]
        assert me["providers"] == ["github"]

    def test_missing_token(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json() == {"detail": CREDENTIALS_DETAIL}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_refresh_token_is_not_an_access_token(self, client):
        data = login(client)

        response = client.get("/auth/me", headers=bearer(data["refresh_token"]))

        assert response.status_code == 401

    def test_blacklist_outage_fails_closed(self, client, session_store):
        """An unreachable store rejects the request instead of skipping the check."""
        data = login(client)
        session_store.fail("is_blacklisted")

        response = client.get("/auth/me", headers=bearer(data["access_token"]))

        assert response.status_code == 503


class TestRefresh:
    """POST /auth/refresh."""

    def test_refresh_and_reuse(self, client):
        """A rotated refresh token is refused with the generic 401."""
        data = login(client)

        refreshed = client.post(
            "/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        reused = client.post(
            "/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        garbage = client.post("/auth/refresh", json={"refresh_token": "garbage"})

        assert refreshed.status_code == 200
        assert refreshed.json()["user"]["id"] == data["user"]["id"]
        assert refreshed.json()["refresh_token"] != data["refresh_token"]
        assert reused.status_code == 401
        assert reused.content == garbage.content

    def test_new_access_token_works(self, client):
        data = login(client)
        refreshed = client.post(
            "/auth/refresh", json={"refresh_token": data["refresh_token"]}
        ).json()

        response = client.get("/auth/me", headers=bearer(refreshed["access_token"]))

        assert response.status_code == 200


class TestLogout:
    """POST /auth/logout."""

    def test_logout_revokes_tokens(self, client):
        """Issue, revoke, then refresh is rejected."""
        data = login(client)

        response = client.post(
            "/auth/logout",
            headers=bearer(data["access_token"]),
            json={"refresh_token": data["refresh_token"]},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Successfully logged out",
        }

        me = client.get("/auth/me", headers=bearer(data["access_token"]))
        refresh = client.post(
            "/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        assert me.status_code == 401
        assert refresh.status_code == 401
        assert me.json() == refresh.json() == {"detail": CREDENTIALS_DETAIL}

    def test_logout_without_body_revokes_cached_refresh_token(self, client):
        data = login(client)

        client.post("/auth/logout", headers=bearer(data["access_token"]))

        refresh = client.post(
            "/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        assert refresh.status_code == 401

    def test_logout_other_session_unaffected(self, client):
        alice = login(client, "github")
        bob = login(client, "google")

        client.post("/auth/logout", headers=bearer(alice["access_token"]))

        response = client.get("/auth/me", headers=bearer(bob["access_token"]))
        assert response.status_code == 200

    def test_logout_requires_token(self, client):
        response = client.post("/auth/logout")

        assert response.status_code == 401

    def test_logout_store_outage(self, client, session_store):
        data = login(client)
        session_store.fail("blacklist")

        response = client.post("/auth/logout", headers=bearer(data["access_token"]))

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"

        session_store.recover()
        retry = client.post("/auth/logout", headers=bearer(data["access_token"]))
        assert retry.status_code == 200

    def test_logout_retry_after_partial_failure(self, client, session_store):
        """The access token is already blacklisted when the session delete fails."""
        data = login(client)
        session_store.fail("delete_session")

        first = client.post("/auth/logout", headers=bearer(data["access_token"]))

        assert first.status_code == 503

        session_store.recover()
        retry = client.post("/auth/logout", headers=bearer(data["access_token"]))

        assert retry.status_code == 200
        assert session_store.ttl(session_key(data["user"]["id"])) is None
        assert session_store.ttl(token_key(data["user"]["id"])) is None
        refresh = client.post(
            "/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        assert refresh.status_code == 401

    def test_logout_with_garbage_refresh_token(self, client):
        data = login(client)

        response = client.post(
            "/auth/logout",
            headers=bearer(data["access_token"]),
            json={"refresh_token": "garbage"},
        )

        assert response.status_code == 200
        me = client.get("/auth/me", headers=bearer(data["access_token"]))
        assert me.status_code == 401

    def test_logout_with_invalid_access_token_is_rejected(self, client):
        response = client.post("/auth/logout", headers=bearer("not-a-token"))

        assert response.status_code == 401


class TestHealth:
    """GET /health."""

    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["session_store"] == "ok"
        assert data["version"] == "0.1.0"

    def test_degraded_when_store_down(self, client, session_store):
        session_store.fail("ping")

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["session_store"] == "unavailable"
