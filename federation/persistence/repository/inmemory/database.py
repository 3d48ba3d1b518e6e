"""Shared state for the in-memory repositories."""

from federation.domain.model import IdentityLink, User
from federation.domain.value import IdentityLinkId, UserId


class InMemoryDatabase:
    """Tables shared by the in-memory user and identity link repositories.

    Uniqueness checks and writes happen in one synchronous step, so they are
    atomic with respect to other coroutines on the event loop.
    """

    def __init__(self) -> None:
        self.users: dict[UserId, User] = {}
        self.identity_links: dict[IdentityLinkId, IdentityLink] = {}

    def email_owner(self, email: str) -> UserId | None:
        """ID of the user holding an email, if any."""
        for user in self.users.values():
            if user.email == email:
                return user.id
        return None

    def link_owner(self, link: IdentityLink) -> IdentityLinkId | None:
        """ID of the link holding the same provider identity, if any."""
        for existing in self.identity_links.values():
            if (
                existing.provider == link.provider
                and existing.provider_subject_id == link.provider_subject_id
            ):
                return existing.id
        return None
