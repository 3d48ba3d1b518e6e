"""Credential value objects."""

from datetime import datetime

from pydantic import Field

from federation.domain.value.common import ValueObject
from federation.domain.value.identifiers import UserId
from federation.domain.value.types import TokenRole


class TokenPair(ValueObject):
    """Access/refresh token pair issued together."""

    access_token: str
    refresh_token: str


class TokenClaims(ValueObject):
    """Verified payload of a locally issued token."""

    user_id: UserId
    email: str
    role: TokenRole
    token_id: str
    issued_at: datetime
    expires_at: datetime


class SessionPayload(ValueObject):
    """Session data cached per user."""

    email: str
    name: str = Field(default="")
