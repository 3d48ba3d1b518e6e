"""In-memory repository implementations for testing."""

from .database import InMemoryDatabase
from .identity_link import InMemoryIdentityLinkRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryDatabase",
    "InMemoryIdentityLinkRepository",
    "InMemoryUserRepository",
]
