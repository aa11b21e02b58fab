"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .logout_all_use_case import LogoutAllUseCase
from .validate_token_use_case import ValidateTokenUseCase
from .change_password_use_case import ChangePasswordUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .complete_password_reset_use_case import CompletePasswordResetUseCase
from .dtos import (
    LoginCommand,
    RefreshCommand,
    ChangePasswordCommand,
    CompletePasswordResetCommand,
    AuthContext,
    LoginResponse,
    RefreshTokenResponse,
    LogoutAllResponse,
    MeResponse,
    MessageResponse,
    TenantInfo,
    UserInfo,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "LogoutAllUseCase",
    "ValidateTokenUseCase",
    "ChangePasswordUseCase",
    "RequestPasswordResetUseCase",
    "CompletePasswordResetUseCase",
    # DTOs - Commands
    "LoginCommand",
    "RefreshCommand",
    "ChangePasswordCommand",
    "CompletePasswordResetCommand",
    # DTOs - Responses
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutAllResponse",
    "MeResponse",
    "MessageResponse",
    # DTOs - Nested Models
    "AuthContext",
    "TenantInfo",
    "UserInfo",
]
