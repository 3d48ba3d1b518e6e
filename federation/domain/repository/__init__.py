"""Repository interfaces for the identity federation domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from federation.domain.repository.identity_link import IdentityLinkRepository
from federation.domain.repository.session_store import SessionStore
from federation.domain.repository.user import UserRepository

__all__ = [
    "UserRepository",
    "IdentityLinkRepository",
    "SessionStore",
]
