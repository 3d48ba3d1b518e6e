"""IdentityLink repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from federation.domain.model import IdentityLink
from federation.domain.repository import IdentityLinkRepository
from federation.domain.value import AuthProvider, UserId
from federation.persistence.database import translate_errors
from federation.persistence.mappers import identity_link_to_dict, row_to_identity_link
from federation.persistence.tables import identity_links_table


class PostgresIdentityLinkRepository(IdentityLinkRepository):
    """PostgreSQL implementation of IdentityLinkRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def save(self, link: IdentityLink) -> IdentityLink:
        """Save identity link to database.

        Args:
            link: IdentityLink to save

        Returns:
            Saved IdentityLink
        """
        link_dict = identity_link_to_dict(link)

        with translate_errors("IdentityLink", "save"):
            async with self.session.begin_nested():
                exists = await self.session.execute(
                    select(identity_links_table.c.id).where(
                        identity_links_table.c.id == link.id
                    )
                )
                if exists.first():
                    stmt = (
                        identity_links_table.update()
                        .where(identity_links_table.c.id == link.id)
                        .values(**link_dict)
                    )
                else:
                    stmt = identity_links_table.insert().values(**link_dict)
                await self.session.execute(stmt)

        return link

    async def find_by_provider(
        self, provider: AuthProvider, provider_subject_id: str
    ) -> Optional[IdentityLink]:
        """Get identity link by provider and provider subject ID.

        Args:
            provider: Identity provider
            provider_subject_id: Provider-specific subject ID

        Returns:
            IdentityLink if found, None otherwise
        """
        stmt = select(identity_links_table).where(
            identity_links_table.c.provider == provider.value,
            identity_links_table.c.provider_subject_id == provider_subject_id,
        )
        with translate_errors("IdentityLink", "find_by_provider"):
            result = await self.session.execute(stmt)
            row = result.mappings().first()

        if not row:
            return None

        return row_to_identity_link(dict(row))

    async def find_all_by_user_id(self, user_id: UserId) -> list[IdentityLink]:
        """Find all identity links for a user.

        Args:
            user_id: User ID to find links for

        Returns:
            List of IdentityLink objects (may be empty)
        """
        stmt = (
            select(identity_links_table)
            .where(identity_links_table.c.user_id == user_id)
            .order_by(identity_links_table.c.created_at)
        )
        with translate_errors("IdentityLink", "find_all_by_user_id"):
            result = await self.session.execute(stmt)
            rows = result.mappings().all()

        return [row_to_identity_link(dict(row)) for row in rows]
