"""Event bus providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from federation.adapter.events import RedisEventPublisher
from federation.config import Settings
from federation.domain.service import EventPublisher
from federation.persistence.cache import create_redis_client
from federation.util.di.base import ProviderBase


class EventsProvider(ProviderBase):
    """Event bus component base."""

    __mock_component__ = "events"


class ProdEventsProvider(EventsProvider):
    """Production event publisher on Redis pub/sub."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_event_publisher(
        self, settings: Settings
    ) -> AsyncIterator[EventPublisher]:
        """Provide Redis event publisher with its own connection pool."""
        client = create_redis_client(settings.redis)
        yield RedisEventPublisher(client, channel_prefix=settings.events.channel_prefix)
        await client.aclose()
