"""PostgreSQL repository implementations."""

from federation.persistence.repository.identity_link import (
    PostgresIdentityLinkRepository,
)
from federation.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresIdentityLinkRepository",
]
