"""User lifecycle event domain service."""

from datetime import datetime

import logfire
from pydantic import Field

from federation.domain.model import User
from federation.domain.model.common import utcnow
from federation.domain.value import LifecycleAction, UserId
from federation.domain.value.common import ValueObject

from .base import Service


class UserLifecycleEvent(ValueObject):
    """Event announcing a change to a user, for downstream services."""

    user_id: UserId
    email: str
    name: str
    avatar_url: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)
    action: LifecycleAction

    @property
    def routing_key(self) -> str:
        """Routing key of the event (user.<action>)."""
        return self.action.routing_key

    def to_message(self) -> dict[str, str | None]:
        """Serialize to the wire format with an ISO 8601 timestamp."""
        return {
            "user_id": str(self.user_id),
            "email": self.email,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "timestamp": self.timestamp.isoformat(),
            "action": self.action.value,
        }


class EventPublisher:
    """Generic event bus interface.

    Delivery guarantees belong to the transport; callers treat publishing
    as fire-and-continue.
    """

    async def publish(self, routing_key: str, message: dict[str, str | None]) -> None:
        """Publish a message under a routing key.

        Args:
            routing_key: Routing key, e.g. "user.created"
            message: JSON-serializable message body
        """
        raise NotImplementedError


class UserEventService(Service):
    """Domain service that builds and publishes user lifecycle events."""

    def __init__(self, publisher: EventPublisher) -> None:
        """Initialize user event service.

        Args:
            publisher: Event bus publisher
        """
        self.publisher = publisher

    @staticmethod
    def build_event(user: User, action: LifecycleAction) -> UserLifecycleEvent:
        """Build the lifecycle event for a user."""
        return UserLifecycleEvent(
            user_id=user.id,
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
            action=action,
        )

    async def publish(self, user: User, action: LifecycleAction) -> UserLifecycleEvent:
        """Publish a lifecycle event for a user.

        Args:
            user: The user the event is about
            action: What happened to the user

        Returns:
            The published event
        """
        event = self.build_event(user, action)
        with logfire.span(
            "user_event_service.publish",
            user_id=str(user.id),
            routing_key=event.routing_key,
        ):
            await self.publisher.publish(event.routing_key, event.to_message())
            logfire.info(
                "User lifecycle event published",
                user_id=str(user.id),
                routing_key=event.routing_key,
            )
        return event
