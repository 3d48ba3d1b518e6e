"""Microsoft OAuth adapter."""

from .client import (
    MicrosoftOAuthClient,
    MockMicrosoftOAuthClient,
    RealMicrosoftOAuthClient,
)

__all__ = [
    "MicrosoftOAuthClient",
    "RealMicrosoftOAuthClient",
    "MockMicrosoftOAuthClient",
]
