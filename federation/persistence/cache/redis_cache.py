"""Redis-backed session, token cache and revocation store."""

import json
from contextlib import contextmanager
from typing import Iterator, Optional

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from federation.config import RedisSettings
from federation.domain.error import StoreUnavailableError
from federation.domain.repository import SessionStore
from federation.domain.repository.session_store import (
    blacklist_key,
    session_key,
    token_key,
)
from federation.domain.value import SessionPayload, TokenPair, UserId


def create_redis_client(settings: RedisSettings) -> redis.Redis:
    """Create an async Redis client.

    Every command is bounded by ``socket_timeout``.

    Args:
        settings: Redis configuration

    Returns:
        Redis client (connections are opened lazily)
    """
    return redis.from_url(
        settings.url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.socket_timeout,
        socket_connect_timeout=settings.connect_timeout,
    )


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Map Redis failures and timeouts onto StoreUnavailableError."""
    try:
        yield
    except (RedisError, OSError, TimeoutError) as e:
        raise StoreUnavailableError("cache", operation, e) from e


class RedisSessionStore(SessionStore):
    """SessionStore on Redis; every key is written with an expiry."""

    def __init__(self, client: redis.Redis) -> None:
        """Initialize store with a Redis client.

        Args:
            client: Async Redis client
        """
        self.client = client

    async def cache_token_pair(self, user_id: UserId, pair: TokenPair, ttl: int) -> None:
        """Cache the latest token pair issued to a user."""
        with translate_errors("cache_token_pair"):
            await self.client.set(token_key(user_id), pair.model_dump_json(), ex=ttl)

    async def get_cached_token_pair(self, user_id: UserId) -> Optional[TokenPair]:
        """Get the cached token pair, if any."""
        with translate_errors("get_cached_token_pair"):
            raw = await self.client.get(token_key(user_id))
        return _parse(TokenPair, raw)

    async def delete_cached_token_pair(self, user_id: UserId) -> None:
        """Remove the cached token pair."""
        with translate_errors("delete_cached_token_pair"):
            await self.client.delete(token_key(user_id))

    async def set_session(
        self, user_id: UserId, payload: SessionPayload, ttl: int
    ) -> None:
        """Store the session payload for a user."""
        with translate_errors("set_session"):
            await self.client.set(session_key(user_id), payload.model_dump_json(), ex=ttl)

    async def get_session(self, user_id: UserId) -> Optional[SessionPayload]:
        """Get the session payload, if any."""
        with translate_errors("get_session"):
            raw = await self.client.get(session_key(user_id))
        return _parse(SessionPayload, raw)

    async def delete_session(self, user_id: UserId) -> None:
        """Remove the session payload."""
        with translate_errors("delete_session"):
            await self.client.delete(session_key(user_id))

    async def blacklist(self, token: str, ttl: int) -> None:
        """Mark a token as revoked for ``ttl`` seconds."""
        if ttl <= 0:
            return
        with translate_errors("blacklist"):
            await self.client.set(blacklist_key(token), "1", ex=ttl)

    async def is_blacklisted(self, token: str) -> bool:
        """Check whether a token has been revoked."""
        with translate_errors("is_blacklisted"):
            return bool(await self.client.exists(blacklist_key(token)))

    async def ping(self) -> bool:
        """Check that Redis is reachable."""
        with translate_errors("ping"):
            return bool(await self.client.ping())


def _parse(model, raw: str | None):
    if raw is None:
        return None
    try:
        return model.model_validate(json.loads(raw))
    except (ValueError, ValidationError):
        # Unreadable entries are treated as absent
        return None
