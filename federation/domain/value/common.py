"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable data compared by value.

    Unknown fields are rejected so that provider payloads and token claims
    cannot smuggle extra data through a value object.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
