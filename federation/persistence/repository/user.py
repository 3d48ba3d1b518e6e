"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from federation.domain.model import IdentityLink, User
from federation.domain.repository import UserRepository
from federation.domain.value import UserId, normalize_email
from federation.persistence.database import translate_errors
from federation.persistence.mappers import (
    identity_link_to_dict,
    row_to_user,
    user_to_dict,
)
from federation.persistence.tables import identity_links_table, users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        with translate_errors("User", "find_by_id"):
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email.

        Args:
            email: Email to search for

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.email == normalize_email(email))
        with translate_errors("User", "find_by_email"):
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def save(self, user: User) -> User:
        """Save user to database.

        Runs in a savepoint so a uniqueness conflict leaves the surrounding
        transaction usable for a retry.

        Args:
            user: User to save

        Returns:
            Saved user
        """
        user_dict = user_to_dict(user)

        with translate_errors("User", "save"):
            async with self.session.begin_nested():
                exists = await self.session.execute(
                    select(users_table.c.id).where(users_table.c.id == user.id)
                )
                if exists.first():
                    stmt = (
                        users_table.update()
                        .where(users_table.c.id == user.id)
                        .values(**user_dict)
                    )
                else:
                    stmt = users_table.insert().values(**user_dict)
                await self.session.execute(stmt)

        return user

    async def create_with_link(self, user: User, link: IdentityLink) -> User:
        """Insert a user and its first identity link in one savepoint.

        Args:
            user: New user
            link: New identity link owned by the user

        Returns:
            Created user
        """
        with translate_errors("User", "create_with_link"):
            async with self.session.begin_nested():
                await self.session.execute(
                    users_table.insert().values(**user_to_dict(user))
                )
                await self.session.execute(
                    identity_links_table.insert().values(**identity_link_to_dict(link))
                )

        return user
