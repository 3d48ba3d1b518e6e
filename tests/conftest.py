"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from federation.config import RevocationSettings, SessionSettings, TokenSettings
from federation.domain.model import IdentityLink, User
from federation.domain.value import AuthProvider, IdentityLinkId, UserId

ACCESS_SECRET = "test-access-secret-at-least-32-bytes-long"
REFRESH_SECRET = "test-refresh-secret-at-least-32-bytes-long"


class FakeClock:
    """Controllable clock for expiry tests."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_settings() -> TokenSettings:
    return TokenSettings(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_expires_in=900,
        refresh_expires_in="7d",
    )


@pytest.fixture
def session_settings() -> SessionSettings:
    return SessionSettings(token_cache_ttl="7d", session_ttl="1h")


@pytest.fixture
def revocation_settings() -> RevocationSettings:
    return RevocationSettings(retry_attempts=3, fail_open=False)


def make_user(email: str = "alice@example.com", name: str = "Alice") -> User:
    """Build a user with a fresh id."""
    return User(id=UserId(uuid4()), email=email, name=name)


def make_link(
    user_id: UserId,
    provider: AuthProvider = AuthProvider.GITHUB,
    provider_subject_id: str = "1001",
) -> IdentityLink:
    """Build an identity link with a fresh id."""
    return IdentityLink(
        id=IdentityLinkId(uuid4()),
        user_id=user_id,
        provider=provider,
        provider_subject_id=provider_subject_id,
    )
