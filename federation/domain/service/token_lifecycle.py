"""Token lifecycle domain service.

Per logical session: Unauthenticated -> Issued -> (Refreshed)* -> Revoked.
Store and event side effects go through SideEffectRunner, which applies the
policy table in ``side_effects``.
"""

from functools import partial
from typing import Awaitable, Callable, Literal

import logfire
from pydantic import BaseModel

from federation.config import RevocationSettings, SessionSettings
from federation.domain.error import (
    CredentialError,
    MalformedTokenError,
    RevocationFailedError,
    RevokedTokenError,
    StoreUnavailableError,
    UserNotFoundError,
)
from federation.domain.model import User
from federation.domain.repository import SessionStore, UserRepository
from federation.domain.value import (
    ExternalIdentityAssertion,
    LifecycleAction,
    SessionPayload,
    TokenClaims,
    TokenRole,
    UserId,
)

from .base import Service
from .credential_codec import CredentialCodec
from .event_service import UserEventService
from .identity_resolver import IdentityResolver
from .side_effects import SideEffect, SideEffectRunner


class UserSummary(BaseModel):
    """Public view of a user."""

    id: str
    email: str
    name: str
    avatar_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        """Build the summary of a user."""
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
        )


class IssuedCredentials(BaseModel):
    """Token pair handed to the caller."""

    access_token: str
    refresh_token: str
    expires_in: int  # Seconds until the access token expires
    user: UserSummary


class TokenLifecycleService(Service):
    """Issues, refreshes, verifies and revokes local credentials."""

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        credential_codec: CredentialCodec,
        session_store: SessionStore,
        user_repository: UserRepository,
        user_event_service: UserEventService,
        side_effects: SideEffectRunner,
        session_settings: SessionSettings,
        revocation_settings: RevocationSettings,
        refresh_rotation: Literal["rotate", "sliding"] = "rotate",
    ) -> None:
        """Initialize token lifecycle service.

        Args:
            identity_resolver: Resolves assertions to users
            credential_codec: Signs and verifies tokens
            session_store: Session, token cache and blacklist store
            user_repository: User repository
            user_event_service: Publishes lifecycle events
            side_effects: Applies the side effect policy table
            session_settings: Cache TTLs
            revocation_settings: Blacklist failure behaviour
            refresh_rotation: Whether a used refresh token is revoked
        """
        self.identity_resolver = identity_resolver
        self.credential_codec = credential_codec
        self.session_store = session_store
        self.user_repository = user_repository
        self.user_event_service = user_event_service
        self.side_effects = side_effects
        self.session_settings = session_settings
        self.revocation_settings = revocation_settings
        self.refresh_rotation = refresh_rotation

    async def issue_for_assertion(
        self, assertion: ExternalIdentityAssertion
    ) -> IssuedCredentials:
        """Resolve an assertion and issue a fresh token pair.

        Args:
            assertion: Provider assertion

        Returns:
            Issued credentials and user summary

        Raises:
            InvalidAssertionError: If the assertion lacks subject id or email
        """
        with logfire.span(
            "token_lifecycle.issue_for_assertion",
            provider=assertion.provider.value,
        ):
            user, is_new_user = await self.identity_resolver.resolve(assertion)
            credentials = await self._issue(user)

            action = LifecycleAction.CREATED if is_new_user else LifecycleAction.UPDATED
            await self.side_effects.run(
                SideEffect.PUBLISH_EVENT,
                partial(self.user_event_service.publish, user, action),
            )

            logfire.info(
                "Credentials issued",
                user_id=str(user.id),
                is_new_user=is_new_user,
            )
            return credentials

    async def refresh(self, refresh_token: str) -> IssuedCredentials:
        """Exchange a refresh token for a fresh pair.

        Args:
            refresh_token: Refresh token previously issued

        Returns:
            Newly issued credentials

        Raises:
            RevokedTokenError: If the refresh token is blacklisted
            ExpiredTokenError, InvalidSignatureError, MalformedTokenError:
                If the token does not verify
            UserNotFoundError: If the user no longer exists
        """
        with logfire.span("token_lifecycle.refresh"):
            await self._ensure_not_revoked(refresh_token)
            claims = self.credential_codec.verify(refresh_token, TokenRole.REFRESH)

            user = await self.user_repository.find_by_id(claims.user_id)
            if not user:
                logfire.warn("Refresh for missing user", user_id=str(claims.user_id))
                raise UserNotFoundError(str(claims.user_id))

            if self.refresh_rotation == "rotate":
                ttl = self.credential_codec.remaining_lifetime(
                    refresh_token, TokenRole.REFRESH
                )
                await self.side_effects.run(
                    SideEffect.BLACKLIST_TOKEN,
                    partial(self.session_store.blacklist, refresh_token, ttl),
                )
                logfire.info("Previous refresh token revoked", user_id=str(user.id))
            else:
                logfire.info(
                    "Previous refresh token stays valid until expiry",
                    user_id=str(user.id),
                    expires_at=claims.expires_at.isoformat(),
                )

            return await self._issue(user)

    async def authenticate(self, access_token: str) -> TokenClaims:
        """Verify an access token for a protected request.

        A revoked token is rejected for the rest of its natural lifetime.

        Raises:
            CredentialError: If the token is invalid, expired or revoked
        """
        claims = self.credential_codec.verify(access_token, TokenRole.ACCESS)
        await self._ensure_not_revoked(access_token)
        return claims

    def identify(self, access_token: str) -> TokenClaims:
        """Verify an access token without consulting the blacklist.

        Used by logout, so that a logout which failed after blacklisting the
        access token can be retried with the same token.

        Raises:
            CredentialError: If the token is invalid or expired
        """
        return self.credential_codec.verify(access_token, TokenRole.ACCESS)

    async def revoke(
        self,
        user_id: UserId,
        access_token: str,
        refresh_token: str | None = None,
    ) -> None:
        """Revoke a session.

        Blacklists the access token (and the session's refresh tokens) for
        their remaining lifetime, then deletes the session and the cached
        token pair. Safe to call again after a failure.

        A presented refresh token that does not verify is skipped; the rest of
        the session is still revoked.

        Args:
            user_id: Owner of the session
            access_token: Access token presented at logout
            refresh_token: Refresh token presented at logout, if any

        Raises:
            CredentialError: If the access token, or a verifiable refresh
                token, is not the user's
            RevocationFailedError: If a step still fails after retries
        """
        with logfire.span("token_lifecycle.revoke", user_id=str(user_id)):
            to_revoke = [
                (access_token, TokenRole.ACCESS),
            ]
            self._ensure_owned(access_token, TokenRole.ACCESS, user_id)

            if refresh_token:
                try:
                    owner = self.credential_codec.inspect(
                        refresh_token, TokenRole.REFRESH
                    ).user_id
                except CredentialError as e:
                    logfire.warn("Skipping unverifiable refresh token", error=str(e))
                    refresh_token = None
                else:
                    self._check_owner(owner, TokenRole.REFRESH, user_id)
                    to_revoke.append((refresh_token, TokenRole.REFRESH))

            cached = await self.side_effects.run(
                SideEffect.READ_CACHED_TOKEN_PAIR,
                partial(self.session_store.get_cached_token_pair, user_id),
            )
            if cached and cached.refresh_token != refresh_token:
                to_revoke.append((cached.refresh_token, TokenRole.REFRESH))

            for token, role in to_revoke:
                try:
                    ttl = self.credential_codec.remaining_lifetime(token, role)
                except CredentialError as e:
                    # Only the cached token can get here; it was never presented
                    logfire.warn("Skipping unverifiable cached token", error=str(e))
                    continue
                if ttl <= 0:
                    continue
                await self._revocation_step(
                    f"blacklist_{role.value}_token",
                    SideEffect.BLACKLIST_TOKEN,
                    partial(self.session_store.blacklist, token, ttl),
                )

            await self._revocation_step(
                "delete_session",
                SideEffect.DELETE_SESSION,
                partial(self.session_store.delete_session, user_id),
            )
            await self._revocation_step(
                "delete_cached_token_pair",
                SideEffect.DELETE_CACHED_TOKEN_PAIR,
                partial(self.session_store.delete_cached_token_pair, user_id),
            )

            logfire.info(
                "Session revoked",
                user_id=str(user_id),
                revoked_tokens=len(to_revoke),
            )

    async def current_user(self, user_id: UserId) -> UserSummary:
        """Get the summary of a user.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.user_repository.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return UserSummary.from_user(user)

    async def _issue(self, user: User) -> IssuedCredentials:
        pair = self.credential_codec.issue_pair(user.id, user.email)

        await self.side_effects.run(
            SideEffect.CACHE_TOKEN_PAIR,
            partial(
                self.session_store.cache_token_pair,
                user.id,
                pair,
                self.session_settings.token_cache_ttl,
            ),
        )
        await self.side_effects.run(
            SideEffect.SET_SESSION,
            partial(
                self.session_store.set_session,
                user.id,
                SessionPayload(email=user.email, name=user.name),
                self.session_settings.session_ttl,
            ),
        )

        return IssuedCredentials(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_in=self.credential_codec.access_expires_in,
            user=UserSummary.from_user(user),
        )

    async def _ensure_not_revoked(self, token: str) -> None:
        try:
            revoked = await self.side_effects.run(
                SideEffect.CHECK_BLACKLIST,
                partial(self.session_store.is_blacklisted, token),
            )
        except StoreUnavailableError:
            if not self.revocation_settings.fail_open:
                raise
            logfire.warn("Blacklist unavailable, accepting token without check")
            return

        if revoked:
            logfire.info("Revoked token presented")
            raise RevokedTokenError("Token has been revoked")

    def _ensure_owned(self, token: str, role: TokenRole, user_id: UserId) -> None:
        owner = self.credential_codec.inspect(token, role).user_id
        self._check_owner(owner, role, user_id)

    @staticmethod
    def _check_owner(owner: UserId, role: TokenRole, user_id: UserId) -> None:
        if owner != user_id:
            logfire.warn(
                "Token presented for another user",
                user_id=str(user_id),
                role=role.value,
            )
            raise MalformedTokenError("Token does not belong to user")

    async def _revocation_step(
        self,
        step: str,
        effect: SideEffect,
        action: Callable[[], Awaitable[None]],
    ) -> None:
        try:
            await self.side_effects.run(effect, action)
        except StoreUnavailableError as e:
            raise RevocationFailedError(step, e) from e
