"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows and profile management
"""

from .auth import (
    ChangePasswordUseCase,
    GetCurrentIdentityUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)

__all__ = [
    "ChangePasswordUseCase",
    "GetCurrentIdentityUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshTokenUseCase",
    "RegisterCommand",
    "RegisterUseCase",
    "UpdateProfileCommand",
    "UpdateProfileUseCase",
]
