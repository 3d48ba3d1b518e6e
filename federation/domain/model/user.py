"""User aggregate root.

A user is a deduplicated human account. Any number of external identities
can be linked to it; its email is the natural deduplication key.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from federation.domain.model.common import DomainModel, utcnow
from federation.domain.value import UserId, normalize_email


class User(DomainModel):
    """User aggregate root - provider-agnostic."""

    id: UserId
    email: str  # Unique across all users
    name: str
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Store emails normalized so lookups are case-insensitive."""
        normalized = normalize_email(v)
        if "@" not in normalized:
            raise ValueError("Email must contain '@'")
        return normalized
