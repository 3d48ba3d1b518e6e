"""Revocation and session store interface."""

from abc import ABC, abstractmethod
from typing import Optional

from federation.domain.value import SessionPayload, TokenPair, UserId


def token_key(user_id: UserId) -> str:
    """Cache key of a user's token pair."""
    return f"token:{user_id}"


def session_key(user_id: UserId) -> str:
    """Cache key of a user's session payload."""
    return f"session:{user_id}"


def blacklist_key(token: str) -> str:
    """Cache key marking a token as revoked."""
    return f"blacklist:{token}"


class SessionStore(ABC):
    """Key-value store of cached credentials, sessions and revoked tokens.

    Every entry carries a TTL in seconds. All operations are idempotent.
    Implementations raise StoreUnavailableError when the backend fails or
    times out; whether that is fatal is decided by the caller.
    """

    @abstractmethod
    async def cache_token_pair(self, user_id: UserId, pair: TokenPair, ttl: int) -> None:
        """Cache the latest token pair issued to a user."""
        pass

    @abstractmethod
    async def get_cached_token_pair(self, user_id: UserId) -> Optional[TokenPair]:
        """Get the cached token pair, if any."""
        pass

    @abstractmethod
    async def delete_cached_token_pair(self, user_id: UserId) -> None:
        """Remove the cached token pair."""
        pass

    @abstractmethod
    async def set_session(
        self, user_id: UserId, payload: SessionPayload, ttl: int
    ) -> None:
        """Store the session payload for a user."""
        pass

    @abstractmethod
    async def get_session(self, user_id: UserId) -> Optional[SessionPayload]:
        """Get the session payload, if any."""
        pass

    @abstractmethod
    async def delete_session(self, user_id: UserId) -> None:
        """Remove the session payload."""
        pass

    @abstractmethod
    async def blacklist(self, token: str, ttl: int) -> None:
        """Mark a token as revoked for ``ttl`` seconds."""
        pass

    @abstractmethod
    async def is_blacklisted(self, token: str) -> bool:
        """Check whether a token has been revoked."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend is reachable."""
        pass
