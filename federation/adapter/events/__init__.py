"""Event bus adapter."""

from .publisher import MockEventPublisher, RedisEventPublisher

__all__ = ["RedisEventPublisher", "MockEventPublisher"]
