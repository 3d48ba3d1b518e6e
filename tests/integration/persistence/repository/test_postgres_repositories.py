"""Integration tests for the Postgres user and identity link repositories.

These tests verify that uniqueness rules enforced by the schema surface as
ConflictError and that failed writes leave no partial records behind.
"""

from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from federation.domain.error import ConflictError
from federation.domain.repository import IdentityLinkRepository, UserRepository
from federation.domain.value import AuthProvider
from tests.conftest import make_link, make_user
from tests.harness import create_env_fixture

# Integration test fixture - real PostgreSQL
integration_env = create_env_fixture(unmock={"persistence"})


@pytest_asyncio.fixture(autouse=True)
async def clean_database(integration_env):
    """Clean database before each test."""
    session = await integration_env.get(AsyncSession)

    await session.execute(text("TRUNCATE TABLE identity_links, users CASCADE"))
    await session.commit()

    yield


class TestPostgresUserRepository:
    """Integration tests for PostgresUserRepository."""

    @pytest.mark.asyncio
    async def test_save_and_find(self, integration_env):
        user_repo = await integration_env.get(UserRepository)
        user = make_user("Alice@Example.com")

        await user_repo.save(user)

        found = await user_repo.find_by_id(user.id)
        assert found is not None
        assert found.email == "alice@example.com"
        assert (await user_repo.find_by_email("ALICE@example.com")).id == user.id

    @pytest.mark.asyncio
    async def test_update(self, integration_env):
        user_repo = await integration_env.get(UserRepository)
        user = await user_repo.save(make_user())

        await user_repo.save(
            user.model_copy(update={"name": "Alice B", "avatar_url": "https://a/b.png"})
        )

        found = await user_repo.find_by_id(user.id)
        assert found.name == "Alice B"
        assert found.avatar_url == "https://a/b.png"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, integration_env):
        """The unique email index rejects a second account."""
        user_repo = await integration_env.get(UserRepository)
        await user_repo.save(make_user("alice@example.com"))

        with pytest.raises(ConflictError):
            await user_repo.save(make_user("alice@example.com", "Imposter"))

        # Session still usable after the failed savepoint
        assert await user_repo.find_by_email("alice@example.com") is not None

    @pytest.mark.asyncio
    async def test_create_with_link_atomic(self, integration_env):
        """A conflicting link rolls back the new user as well."""
        user_repo = await integration_env.get(UserRepository)
        link_repo = await integration_env.get(IdentityLinkRepository)

        alice = make_user("alice@example.com")
        await user_repo.create_with_link(alice, make_link(alice.id, provider_subject_id="1"))

        bob = make_user("bob@example.com")
        with pytest.raises(ConflictError):
            await user_repo.create_with_link(bob, make_link(bob.id, provider_subject_id="1"))

        assert await user_repo.find_by_id(bob.id) is None
        links = await link_repo.find_all_by_user_id(alice.id)
        assert [link.provider_subject_id for link in links] == ["1"]


class TestPostgresIdentityLinkRepository:
    """Integration tests for PostgresIdentityLinkRepository."""

    @pytest.mark.asyncio
    async def test_find_by_provider(self, integration_env):
        user_repo = await integration_env.get(UserRepository)
        link_repo = await integration_env.get(IdentityLinkRepository)
        user = await user_repo.save(make_user())
        link = make_link(user.id, AuthProvider.GOOGLE, "g-1")

        await link_repo.save(link)

        found = await link_repo.find_by_provider(AuthProvider.GOOGLE, "g-1")
        assert found.id == link.id
        assert found.user_id == user.id
        assert await link_repo.find_by_provider(AuthProvider.GITHUB, "g-1") is None

    @pytest.mark.asyncio
    async def test_update_provider_tokens(self, integration_env):
        user_repo = await integration_env.get(UserRepository)
        link_repo = await integration_env.get(IdentityLinkRepository)
        user = await user_repo.save(make_user())
        link = await link_repo.save(make_link(user.id))

        await link_repo.save(
            link.model_copy(update={"provider_access_token": "gho_new"})
        )

        found = await link_repo.find_by_provider(link.provider, link.provider_subject_id)
        assert found.provider_access_token == "gho_new"

    @pytest.mark.asyncio
    async def test_duplicate_provider_identity_conflicts(self, integration_env):
        user_repo = await integration_env.get(UserRepository)
        link_repo = await integration_env.get(IdentityLinkRepository)
        alice = await user_repo.save(make_user("alice@example.com"))
        bob = await user_repo.save(make_user("bob@example.com"))
        await link_repo.save(make_link(alice.id, provider_subject_id="7"))

        with pytest.raises(ConflictError):
            await link_repo.save(make_link(bob.id, provider_subject_id="7"))

    @pytest.mark.asyncio
    async def test_find_all_by_user_id_ordered(self, integration_env):
        user_repo = await integration_env.get(UserRepository)
        link_repo = await integration_env.get(IdentityLinkRepository)
        user = await user_repo.save(make_user())
        google = make_link(user.id, AuthProvider.GOOGLE, "g")
        github = make_link(user.id, AuthProvider.GITHUB, "1").model_copy(
            update={"created_at": google.created_at - timedelta(hours=1)}
        )
        await link_repo.save(google)
        await link_repo.save(github)

        links = await link_repo.find_all_by_user_id(user.id)

        assert [link.provider for link in links] == [
            AuthProvider.GITHUB,
            AuthProvider.GOOGLE,
        ]
