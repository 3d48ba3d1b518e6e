"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from federation.domain.model.identity_link import IdentityLink
from federation.domain.model.user import User
from federation.domain.value import UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their (normalized) email.

        Args:
            email: The user's email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user

        Raises:
            ConflictError: If another user already owns the email
        """
        pass

    @abstractmethod
    async def create_with_link(self, user: User, link: IdentityLink) -> User:
        """Create a user and its first identity link in one atomic write.

        Either both records exist afterwards or neither does.

        Args:
            user: The new user
            link: The new identity link, owned by ``user``

        Returns:
            The created user

        Raises:
            ConflictError: If the email or the provider identity is taken
        """
        pass
