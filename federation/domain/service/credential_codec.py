"""Credential codec domain service.

Signs and verifies the locally issued access/refresh tokens. Pure function
of the configured secrets, lifetimes and clock.
"""

import math
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import UUID, uuid4

import logfire
from pydantic import ValidationError

from federation.config import TokenSettings
from federation.domain.error import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
)
from federation.domain.model.common import utcnow
from federation.domain.value import TokenClaims, TokenPair, TokenRole, UserId
from federation.util.jwt import (
    JWTError,
    JWTExpiredError,
    JWTSignatureError,
    create_token,
    verify_token,
)

from .base import Service


class CredentialCodec(Service):
    """Domain service for local token signing and verification."""

    def __init__(
        self,
        token_settings: TokenSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize credential codec.

        Args:
            token_settings: Secrets, algorithm and lifetimes
            clock: Source of the current time
        """
        self.token_settings = token_settings
        self.clock = clock

    @property
    def access_expires_in(self) -> int:
        """Lifetime of an access token in seconds."""
        return self.token_settings.access_expires_in

    def _secret(self, role: TokenRole) -> str:
        if role is TokenRole.ACCESS:
            return self.token_settings.access_secret
        return self.token_settings.refresh_secret

    def _lifetime(self, role: TokenRole) -> int:
        if role is TokenRole.ACCESS:
            return self.token_settings.access_expires_in
        return self.token_settings.refresh_expires_in

    def issue(self, user_id: UserId, email: str, role: TokenRole = TokenRole.ACCESS) -> str:
        """Issue a signed token.

        Args:
            user_id: Subject of the token
            email: Email of the subject
            role: Access or refresh

        Returns:
            Signed token string
        """
        with logfire.span("credential_codec.issue", user_id=str(user_id), role=role.value):
            issued_at = int(self.clock().timestamp())
            claims = {
                "sub": str(user_id),
                "email": email,
                "typ": role.value,
                "iat": issued_at,
                "exp": issued_at + self._lifetime(role),
                "jti": uuid4().hex,
            }
            return create_token(
                claims, self._secret(role), self.token_settings.algorithm
            )

    def issue_pair(self, user_id: UserId, email: str) -> TokenPair:
        """Issue an access/refresh pair for a user."""
        return TokenPair(
            access_token=self.issue(user_id, email, TokenRole.ACCESS),
            refresh_token=self.issue(user_id, email, TokenRole.REFRESH),
        )

    def verify(self, token: str, role: TokenRole) -> TokenClaims:
        """Verify a token and return its claims.

        Args:
            token: Signed token string
            role: Role the token must have

        Returns:
            Verified claims

        Raises:
            ExpiredTokenError: If the token is past its expiry
            InvalidSignatureError: If the token was tampered with or signed
                with another secret
            MalformedTokenError: If the token is structurally invalid
        """
        with logfire.span("credential_codec.verify", role=role.value):
            claims = self._decode(token, role, verify_exp=True)
            logfire.debug("Token verified", user_id=str(claims.user_id), role=role.value)
            return claims

    def inspect(self, token: str, role: TokenRole) -> TokenClaims:
        """Read the claims of a possibly expired token.

        The signature is verified; expiry is not enforced.

        Raises:
            InvalidSignatureError: If the token was tampered with
            MalformedTokenError: If the token is structurally invalid
        """
        return self._decode(token, role, verify_exp=False)

    def remaining_lifetime(self, token: str, role: TokenRole) -> int:
        """Seconds until a token expires naturally, 0 if it already has."""
        claims = self.inspect(token, role)
        remaining = (claims.expires_at - self.clock()).total_seconds()
        return max(0, math.ceil(remaining))

    def _decode(self, token: str, role: TokenRole, verify_exp: bool) -> TokenClaims:
        try:
            raw = verify_token(
                token,
                self._secret(role),
                self.token_settings.algorithm,
                self.clock(),
                verify_exp=verify_exp,
            )
        except JWTExpiredError as e:
            logfire.info("Token expired", role=role.value)
            raise ExpiredTokenError(str(e)) from e
        except JWTSignatureError as e:
            logfire.warn("Token signature invalid", role=role.value)
            raise InvalidSignatureError(str(e)) from e
        except JWTError as e:
            logfire.warn("Token malformed", role=role.value, error=str(e))
            raise MalformedTokenError(str(e)) from e

        return self._to_claims(raw, role)

    @staticmethod
    def _to_claims(raw: dict[str, Any], role: TokenRole) -> TokenClaims:
        if raw.get("typ") != role.value:
            raise MalformedTokenError(f"Expected {role.value} token")
        try:
            return TokenClaims(
                user_id=UserId(UUID(str(raw["sub"]))),
                email=raw["email"],
                role=role,
                token_id=raw["jti"],
                issued_at=datetime.fromtimestamp(raw["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(raw["exp"], tz=timezone.utc),
            )
        except (ValueError, TypeError, ValidationError) as e:
            raise MalformedTokenError(f"Invalid token claims: {e}") from e
