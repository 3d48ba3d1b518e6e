"""Domain services."""

from .auth_service import AuthService, OAuthClient
from .base import Service
from .credential_codec import CredentialCodec
from .event_service import EventPublisher, UserEventService, UserLifecycleEvent
from .identity_resolver import IdentityResolver, ResolvedIdentity
from .side_effects import (
    SIDE_EFFECT_POLICY,
    EffectPolicy,
    SideEffect,
    SideEffectRunner,
)
from .token_lifecycle import IssuedCredentials, TokenLifecycleService, UserSummary

__all__ = [
    "AuthService",
    "CredentialCodec",
    "EffectPolicy",
    "EventPublisher",
    "IdentityResolver",
    "IssuedCredentials",
    "OAuthClient",
    "ResolvedIdentity",
    "SIDE_EFFECT_POLICY",
    "Service",
    "SideEffect",
    "SideEffectRunner",
    "TokenLifecycleService",
    "UserEventService",
    "UserLifecycleEvent",
    "UserSummary",
]
