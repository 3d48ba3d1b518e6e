"""Authentication use cases."""

from .get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
)
from .login import LoginRequest, LoginUseCase
from .logout import LogoutRequest, LogoutResponse, LogoutUseCase
from .refresh_tokens import RefreshTokensRequest, RefreshTokensUseCase

__all__ = [
    "GetCurrentUserRequest",
    "GetCurrentUserResponse",
    "GetCurrentUserUseCase",
    "LoginRequest",
    "LoginUseCase",
    "LogoutRequest",
    "LogoutResponse",
    "LogoutUseCase",
    "RefreshTokensRequest",
    "RefreshTokensUseCase",
]
