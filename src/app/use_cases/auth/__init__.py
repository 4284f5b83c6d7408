"""
Authentication Use Cases

Registration, sign-in, token rotation, logout and profile management.
"""

from .change_password_use_case import ChangePasswordUseCase
from .dtos import (
    AuthResponse,
    IdentityInfo,
    LogoutAllResponse,
    MessageResponse,
    ProfileResponse,
    RegisterCommand,
    UpdateProfileCommand,
)
from .get_current_identity_use_case import GetCurrentIdentityUseCase
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .register_use_case import RegisterUseCase
from .update_profile_use_case import UpdateProfileUseCase

__all__ = [
    "AuthResponse",
    "ChangePasswordUseCase",
    "GetCurrentIdentityUseCase",
    "IdentityInfo",
    "LoginUseCase",
    "LogoutAllResponse",
    "LogoutUseCase",
    "MessageResponse",
    "ProfileResponse",
    "RefreshTokenUseCase",
    "RegisterCommand",
    "RegisterUseCase",
    "UpdateProfileCommand",
    "UpdateProfileUseCase",
]
