"""User lifecycle event publishers."""

import json

import logfire
import redis.asyncio as redis
from redis.exceptions import RedisError

from federation.domain.error import StoreUnavailableError
from federation.domain.service.event_service import EventPublisher


class RedisEventPublisher(EventPublisher):
    """Publishes events on Redis pub/sub, one channel per routing key."""

    def __init__(self, client: redis.Redis, channel_prefix: str = "") -> None:
        """Initialize publisher.

        Args:
            client: Async Redis client
            channel_prefix: Prepended to every routing key
        """
        self.client = client
        self.channel_prefix = channel_prefix

    def channel_for(self, routing_key: str) -> str:
        """Channel name used for a routing key."""
        return f"{self.channel_prefix}{routing_key}"

    async def publish(self, routing_key: str, message: dict[str, str | None]) -> None:
        """Publish a JSON message on the routing key's channel.

        Raises:
            StoreUnavailableError: If Redis cannot be reached
        """
        channel = self.channel_for(routing_key)
        try:
            receivers = await self.client.publish(channel, json.dumps(message))
        except (RedisError, OSError, TimeoutError) as e:
            raise StoreUnavailableError("events", "publish", e) from e
        logfire.debug("Event sent", channel=channel, receivers=receivers)


class MockEventPublisher(EventPublisher):
    """Records published events in memory for testing."""

    def __init__(self) -> None:
        self.published: list[tuple[str, dict[str, str | None]]] = []

    async def publish(self, routing_key: str, message: dict[str, str | None]) -> None:
        """Record the message."""
        self.published.append((routing_key, message))

    def routing_keys(self) -> list[str]:
        """Routing keys in publication order."""
        return [routing_key for routing_key, _ in self.published]
