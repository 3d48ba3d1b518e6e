"""Session and revocation store implementations."""

from .inmemory import InMemorySessionStore
from .redis_cache import RedisSessionStore, create_redis_client

__all__ = [
    "InMemorySessionStore",
    "RedisSessionStore",
    "create_redis_client",
]
