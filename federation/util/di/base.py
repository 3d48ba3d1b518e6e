"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Infrastructure components a test container can swap for in-memory mocks
Component = Literal[
    "persistence", "cache", "events", "github", "google", "microsoft"
]


class ProviderBase(Provider):
    """Provider carrying the metadata the container builders select on.

    Attributes:
        __mock_component__: Component a mockable base stands for; None on
            providers that always use their real implementation
        __is_mock__: Set on the in-memory implementation of a component
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
