"""Infrastructure providers."""

# Import bases
from .cache import CacheProvider
from .events import EventsProvider
from .github import GitHubProvider
from .google import GoogleProvider
from .microsoft import MicrosoftProvider
from .oauth import OAuthAggregatorProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .cache import ProdCacheProvider  # noqa: F401
from .events import ProdEventsProvider  # noqa: F401
from .github import ProdGitHubProvider  # noqa: F401
from .google import ProdGoogleProvider  # noqa: F401
from .microsoft import ProdMicrosoftProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
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
