"""JWT token utilities."""

from datetime import datetime
from typing import Any

import jwt

REQUIRED_CLAIMS = ["sub", "email", "typ", "iat", "exp", "jti"]


class JWTError(Exception):
    """JWT-related error."""

    pass


class JWTExpiredError(JWTError):
    """Token is past its expiry."""

    pass


class JWTSignatureError(JWTError):
    """Token signature does not verify."""

    pass


def create_token(claims: dict[str, Any], secret: str, algorithm: str) -> str:
    """Sign a set of claims.

    Args:
        claims: Token claims
        secret: Signing secret
        algorithm: Signing algorithm

    Returns:
        Encoded JWT token
    """
    return jwt.encode(claims, secret, algorithm=algorithm)


def verify_token(
    token: str,
    secret: str,
    algorithm: str,
    now: datetime,
    *,
    verify_exp: bool = True,
) -> dict[str, Any]:
    """Verify and decode a JWT token.

    Expiry is checked against ``now`` rather than the wall clock so callers
    control time.

    Args:
        token: JWT token to verify
        secret: Signing secret
        algorithm: Expected signing algorithm
        now: Current time
        verify_exp: Whether an expired token is an error

    Returns:
        Decoded claims

    Raises:
        JWTExpiredError: If the token is expired
        JWTSignatureError: If the signature does not verify
        JWTError: If the token is otherwise invalid
    """
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={
                "require": REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_iat": False,
            },
        )
    except jwt.InvalidSignatureError:
        raise JWTSignatureError("Invalid token signature")
    except jwt.InvalidTokenError as e:
        raise JWTError(f"Invalid token: {e}")

    if not isinstance(claims["exp"], (int, float)):
        raise JWTError("Invalid token: exp must be numeric")

    if verify_exp and now.timestamp() >= claims["exp"]:
        raise JWTExpiredError("Token has expired")

    return claims
