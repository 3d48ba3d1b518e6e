"""In-memory user repository for testing."""

import asyncio
from typing import Optional

from federation.domain.error import ConflictError
from federation.domain.model import IdentityLink, User
from federation.domain.repository import UserRepository
from federation.domain.value import UserId, normalize_email

from .database import InMemoryDatabase


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, database: InMemoryDatabase | None = None) -> None:
        self.database = database or InMemoryDatabase()

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        await asyncio.sleep(0)
        return self.database.users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        await asyncio.sleep(0)
        owner = self.database.email_owner(normalize_email(email))
        return self.database.users.get(owner) if owner else None

    async def save(self, user: User) -> User:
        """Save or update a user."""
        owner = self.database.email_owner(user.email)
        if owner and owner != user.id:
            raise ConflictError("User", f"email {user.email} already taken")
        self.database.users[user.id] = user
        return user

    async def create_with_link(self, user: User, link: IdentityLink) -> User:
        """Create a user and its first link, or neither."""
        if self.database.email_owner(user.email):
            raise ConflictError("User", f"email {user.email} already taken")
        if self.database.link_owner(link):
            raise ConflictError(
                "IdentityLink",
                f"{link.provider.value}:{link.provider_subject_id} already linked",
            )
        self.database.users[user.id] = user
        self.database.identity_links[link.id] = link
        return user
