"""Domain model entities for identity federation."""

from federation.domain.model.identity_link import IdentityLink
from federation.domain.model.user import User

__all__ = [
    "User",
    "IdentityLink",
]
