"""In-memory identity link repository for testing."""

import asyncio
from typing import Optional

from federation.domain.error import ConflictError
from federation.domain.model import IdentityLink
from federation.domain.repository import IdentityLinkRepository
from federation.domain.value import AuthProvider, UserId

from .database import InMemoryDatabase


class InMemoryIdentityLinkRepository(IdentityLinkRepository):
    """In-memory implementation of IdentityLinkRepository for testing."""

    def __init__(self, database: InMemoryDatabase | None = None) -> None:
        self.database = database or InMemoryDatabase()

    async def save(self, link: IdentityLink) -> IdentityLink:
        """Save or update an identity link."""
        holder = self.database.link_owner(link)
        if holder and holder != link.id:
            raise ConflictError(
                "IdentityLink",
                f"{link.provider.value}:{link.provider_subject_id} already linked",
            )
        self.database.identity_links[link.id] = link
        return link

    async def find_by_provider(
        self, provider: AuthProvider, provider_subject_id: str
    ) -> Optional[IdentityLink]:
        """Find an identity link by provider and subject ID."""
        await asyncio.sleep(0)
        for link in self.database.identity_links.values():
            if (
                link.provider == provider
                and link.provider_subject_id == provider_subject_id
            ):
                return link
        return None

    async def find_all_by_user_id(self, user_id: UserId) -> list[IdentityLink]:
        """Find all identity links for a user."""
        await asyncio.sleep(0)
        links = [
            link
            for link in self.database.identity_links.values()
            if link.user_id == user_id
        ]
        return sorted(links, key=lambda link: link.created_at)
