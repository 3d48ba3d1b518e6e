"""Identity link repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from federation.domain.model.identity_link import IdentityLink
from federation.domain.value import AuthProvider, UserId


class IdentityLinkRepository(ABC):
    """Repository for IdentityLink entity.

    Manages the relationship between users and their external
    provider identities.
    """

    @abstractmethod
    async def find_by_provider(
        self, provider: AuthProvider, provider_subject_id: str
    ) -> Optional[IdentityLink]:
        """Find a link by provider and provider subject ID.

        Args:
            provider: The identity provider
            provider_subject_id: The subject's ID on that provider

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[IdentityLink]:
        """Get all links owned by a user, oldest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of links (may be empty)
        """
        pass

    @abstractmethod
    async def save(self, link: IdentityLink) -> IdentityLink:
        """Save a link (create or update).

        Args:
            link: The link to save

        Returns:
            The saved link

        Raises:
            ConflictError: If another link already holds (provider, subject id)
        """
        pass
