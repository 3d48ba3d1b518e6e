"""Mock providers for testing."""

from .cache import MockCacheProvider
from .events import MockEventsProvider
from .github import MockGitHubProvider
from .google import MockGoogleProvider
from .microsoft import MockMicrosoftProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockCacheProvider",
    "MockEventsProvider",
    "MockGitHubProvider",
    "MockGoogleProvider",
    "MockMicrosoftProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
