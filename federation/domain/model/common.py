"""Shared pieces of the domain entities."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Persisted entity.

    Entities are frozen; repositories receive updated copies made with
    ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)
