"""Session and revocation store providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import redis.asyncio as redis

from federation.config import Settings
from federation.domain.repository import SessionStore
from federation.persistence.cache import RedisSessionStore, create_redis_client
from federation.util.di.base import ProviderBase


class CacheProvider(ProviderBase):
    """Session store component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production session store on Redis."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_redis_client(self, settings: Settings) -> AsyncIterator[redis.Redis]:
        """Provide Redis client, closed when the app stops."""
        client = create_redis_client(settings.redis)
        yield client
        await client.aclose()

    @provide(scope=Scope.APP)
    def get_session_store(self, client: redis.Redis) -> SessionStore:
        """Provide Redis session store."""
        return RedisSessionStore(client)
