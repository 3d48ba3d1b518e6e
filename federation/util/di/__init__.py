"""Dependency injection: provider registry and selection."""

from typing import Type

from federation.util.di.application import ProdApplicationProvider
from federation.util.di.base import Component, ProviderBase
from federation.util.di.core import ProdConfigProvider
from federation.util.di.domain import ProdDomainProvider
from federation.util.di.infrastructure import (
    CacheProvider,
    EventsProvider,
    GitHubProvider,
    GoogleProvider,
    MicrosoftProvider,
    OAuthAggregatorProvider,
    PersistenceProvider,
    ProdCacheProvider,
    ProdEventsProvider,
    ProdGitHubProvider,
    ProdGoogleProvider,
    ProdMicrosoftProvider,
    ProdPersistenceProvider,
)

# Every provider of the app. Mockable components are listed by their base
# class; get_provider picks the implementation.
PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
    CacheProvider,
    EventsProvider,
    GitHubProvider,
    GoogleProvider,
    MicrosoftProvider,
    # Builds dict[AuthProvider, OAuthClient] from the provider clients
    OAuthAggregatorProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a registry entry to the provider class to instantiate.

    A class without subclasses is used as is. A component base is replaced
    by its subclass whose ``__is_mock__`` equals ``use_mock``.

    Raises:
        ValueError: If the component has no such implementation
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    for implementation in implementations:
        if getattr(implementation, "__is_mock__", False) == use_mock:
            return implementation

    kind = "mock" if use_mock else "production"
    component = getattr(base, "__mock_component__", None) or base.__name__
    raise ValueError(f"No {kind} implementation for {component}")


__all__ = [
    "Component",
    "PROVIDERS",
    "ProviderBase",
    "get_provider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "CacheProvider",
    "EventsProvider",
    "GitHubProvider",
    "GoogleProvider",
    "MicrosoftProvider",
    "OAuthAggregatorProvider",
    "PersistenceProvider",
    "ProdCacheProvider",
    "ProdEventsProvider",
    "ProdGitHubProvider",
    "ProdGoogleProvider",
    "ProdMicrosoftProvider",
    "ProdPersistenceProvider",
]
