"""Identity resolution domain service.

Reconciles an external identity assertion with local users and identity
links. Concurrency control relies on the storage layer's uniqueness rules:
a conflicting write means another request got there first, and the whole
read-check-write sequence is retried so it observes the winner's records.
"""

from typing import NamedTuple
from uuid import uuid4

import logfire

from federation.domain.error import ConflictError, InvalidAssertionError, UserNotFoundError
from federation.domain.model import IdentityLink, User
from federation.domain.model.common import utcnow
from federation.domain.repository import IdentityLinkRepository, UserRepository
from federation.domain.value import ExternalIdentityAssertion, IdentityLinkId, UserId

from .base import Service


class ResolvedIdentity(NamedTuple):
    """Outcome of resolving an assertion."""

    user: User
    is_new_user: bool


class IdentityResolver(Service):
    """Domain service that finds or creates the user behind an assertion."""

    def __init__(
        self,
        user_repository: UserRepository,
        identity_link_repository: IdentityLinkRepository,
        max_attempts: int = 3,
    ) -> None:
        """Initialize identity resolver.

        Args:
            user_repository: User repository
            identity_link_repository: Identity link repository
            max_attempts: Attempts of the resolution sequence on conflict
        """
        self.user_repository = user_repository
        self.identity_link_repository = identity_link_repository
        self.max_attempts = max(1, max_attempts)

    async def resolve(self, assertion: ExternalIdentityAssertion) -> ResolvedIdentity:
        """Resolve an assertion to a local user.

        Steps:
        1. Known (provider, subject id): refresh the link's provider tokens and
           apply non-empty profile changes to the user.
        2. Unknown identity, known email: link the identity to that user.
        3. Otherwise: create user and link together.

        Args:
            assertion: Normalized provider assertion

        Returns:
            The user and whether it was created by this call

        Raises:
            InvalidAssertionError: If subject id or email is missing
            UserNotFoundError: If a link points at a user that no longer exists
            ConflictError: If conflicts persist after all attempts
        """
        missing = assertion.missing_fields()
        if missing:
            logfire.warn(
                "Rejected identity assertion",
                provider=assertion.provider.value,
                missing=missing,
            )
            raise InvalidAssertionError(
                f"Assertion is missing required fields: {', '.join(missing)}"
            )

        with logfire.span(
            "identity_resolver.resolve",
            provider=assertion.provider.value,
            provider_subject_id=assertion.provider_subject_id,
        ):
            for attempt in range(1, self.max_attempts):
                try:
                    return await self._resolve_once(assertion)
                except ConflictError as e:
                    logfire.info(
                        "Concurrent resolution detected, retrying",
                        attempt=attempt,
                        max_attempts=self.max_attempts,
                        error=str(e),
                    )
            # Last attempt lets the conflict propagate
            return await self._resolve_once(assertion)

    async def _resolve_once(
        self, assertion: ExternalIdentityAssertion
    ) -> ResolvedIdentity:
        link = await self.identity_link_repository.find_by_provider(
            assertion.provider, assertion.provider_subject_id
        )
        if link:
            user = await self._login_existing_link(link, assertion)
            return ResolvedIdentity(user=user, is_new_user=False)

        existing_user = await self.user_repository.find_by_email(assertion.email)
        if existing_user:
            await self.identity_link_repository.save(
                self._new_link(existing_user.id, assertion)
            )
            logfire.info(
                "Linked new identity to existing user by email",
                user_id=str(existing_user.id),
                provider=assertion.provider.value,
            )
            return ResolvedIdentity(user=existing_user, is_new_user=False)

        now = utcnow()
        user = User(
            id=UserId(uuid4()),
            email=assertion.email,
            name=assertion.default_name,
            avatar_url=assertion.avatar_url or None,
            created_at=now,
            updated_at=now,
        )
        created = await self.user_repository.create_with_link(
            user, self._new_link(user.id, assertion)
        )
        logfire.info(
            "New user created",
            user_id=str(created.id),
            provider=assertion.provider.value,
        )
        return ResolvedIdentity(user=created, is_new_user=True)

    async def _login_existing_link(
        self, link: IdentityLink, assertion: ExternalIdentityAssertion
    ) -> User:
        user = await self.user_repository.find_by_id(link.user_id)
        if not user:
            logfire.error(
                "Identity link points at missing user",
                user_id=str(link.user_id),
                provider=link.provider.value,
            )
            raise UserNotFoundError(str(link.user_id))

        now = utcnow()
        await self.identity_link_repository.save(
            link.model_copy(
                update={
                    "provider_access_token": assertion.provider_access_token,
                    "provider_refresh_token": assertion.provider_refresh_token,
                    "updated_at": now,
                    "last_login_at": now,
                }
            )
        )

        changes = await self._profile_changes(user, assertion)
        if not changes:
            return user

        changes["updated_at"] = now
        updated = await self.user_repository.save(user.model_copy(update=changes))
        logfire.info(
            "User profile updated from provider",
            user_id=str(user.id),
            fields=sorted(k for k in changes if k != "updated_at"),
        )
        return updated

    async def _profile_changes(
        self, user: User, assertion: ExternalIdentityAssertion
    ) -> dict[str, str]:
        """Fields the assertion supplies with a new non-empty value."""
        changes: dict[str, str] = {}

        if assertion.email and assertion.email != user.email:
            owner = await self.user_repository.find_by_email(assertion.email)
            if owner and owner.id != user.id:
                # Emails are unique; accounts are never merged implicitly
                logfire.warn(
                    "Provider email belongs to another user, keeping stored email",
                    user_id=str(user.id),
                    other_user_id=str(owner.id),
                )
            else:
                changes["email"] = assertion.email

        if assertion.name and assertion.name.strip() and assertion.name.strip() != user.name:
            changes["name"] = assertion.name.strip()

        if assertion.avatar_url and assertion.avatar_url != user.avatar_url:
            changes["avatar_url"] = assertion.avatar_url

        return changes

    @staticmethod
    def _new_link(user_id: UserId, assertion: ExternalIdentityAssertion) -> IdentityLink:
        now = utcnow()
        return IdentityLink(
            id=IdentityLinkId(uuid4()),
            user_id=user_id,
            provider=assertion.provider,
            provider_subject_id=assertion.provider_subject_id,
            provider_access_token=assertion.provider_access_token,
            provider_refresh_token=assertion.provider_refresh_token,
            created_at=now,
            updated_at=now,
            last_login_at=now,
        )
