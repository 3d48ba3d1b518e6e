"""Domain value objects for identity federation."""

from federation.domain.value.credentials import SessionPayload, TokenClaims, TokenPair
from federation.domain.value.identifiers import IdentityLinkId, UserId
from federation.domain.value.types import (
    AuthProvider,
    ExternalIdentityAssertion,
    LifecycleAction,
    TokenRole,
    normalize_email,
)

__all__ = [
    # Identifiers
    "UserId",
    "IdentityLinkId",
    # Types
    "AuthProvider",
    "ExternalIdentityAssertion",
    "LifecycleAction",
    "TokenRole",
    "normalize_email",
    # Credentials
    "SessionPayload",
    "TokenClaims",
    "TokenPair",
]
