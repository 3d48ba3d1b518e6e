"""In-memory session store for testing."""

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Optional

from federation.domain.error import StoreUnavailableError
from federation.domain.model.common import utcnow
from federation.domain.repository import SessionStore
from federation.domain.repository.session_store import (
    blacklist_key,
    session_key,
    token_key,
)
from federation.domain.value import SessionPayload, TokenPair, UserId


class InMemorySessionStore(SessionStore):
    """In-memory implementation of SessionStore for testing.

    Entries expire against ``clock``. Operations named in ``failing`` raise
    StoreUnavailableError, to simulate an unreachable backend.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self.clock = clock
        self._entries: dict[str, tuple[object, datetime]] = {}
        self.failing: set[str] = set()

    def fail(self, *operations: str) -> None:
        """Make the named operations raise StoreUnavailableError."""
        self.failing.update(operations)

    def recover(self) -> None:
        """Stop simulating failures."""
        self.failing.clear()

    def ttl(self, key: str) -> Optional[int]:
        """Seconds left on a key, None if absent."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        remaining = (entry[1] - self.clock()).total_seconds()
        return int(remaining) if remaining > 0 else None

    async def _check(self, operation: str) -> None:
        await asyncio.sleep(0)
        if operation in self.failing:
            raise StoreUnavailableError("cache", operation)

    def _set(self, key: str, value: object, ttl: int) -> None:
        self._entries[key] = (value, self.clock() + timedelta(seconds=ttl))

    def _get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def cache_token_pair(self, user_id: UserId, pair: TokenPair, ttl: int) -> None:
        """Cache the latest token pair issued to a user."""
        await self._check("cache_token_pair")
        self._set(token_key(user_id), pair, ttl)

    async def get_cached_token_pair(self, user_id: UserId) -> Optional[TokenPair]:
        """Get the cached token pair, if any."""
        await self._check("get_cached_token_pair")
        return self._get(token_key(user_id))  # type: ignore[return-value]

    async def delete_cached_token_pair(self, user_id: UserId) -> None:
        """Remove the cached token pair."""
        await self._check("delete_cached_token_pair")
        self._entries.pop(token_key(user_id), None)

    async def set_session(
        self, user_id: UserId, payload: SessionPayload, ttl: int
    ) -> None:
        """Store the session payload for a user."""
        await self._check("set_session")
        self._set(session_key(user_id), payload, ttl)

    async def get_session(self, user_id: UserId) -> Optional[SessionPayload]:
        """Get the session payload, if any."""
        await self._check("get_session")
        return self._get(session_key(user_id))  # type: ignore[return-value]

    async def delete_session(self, user_id: UserId) -> None:
        """Remove the session payload."""
        await self._check("delete_session")
        self._entries.pop(session_key(user_id), None)

    async def blacklist(self, token: str, ttl: int) -> None:
        """Mark a token as revoked for ``ttl`` seconds."""
        await self._check("blacklist")
        if ttl > 0:
            self._set(blacklist_key(token), True, ttl)

    async def is_blacklisted(self, token: str) -> bool:
        """Check whether a token has been revoked."""
        await self._check("is_blacklisted")
        return self._get(blacklist_key(token)) is not None

    async def ping(self) -> bool:
        """Check that the store is reachable."""
        await self._check("ping")
        return True
