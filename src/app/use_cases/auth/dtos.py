"""
Authentication Use Case DTOs (Data Transfer Objects)

Command and Response classes for the auth domain. Field names are snake_case
in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.entities import Identity


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(CamelModel):
    """
    Register command - represents registration intent

    Shape checks (email format, password rules, confirmation) happen in the
    use case so every caller gets the same field-level errors.
    """

    email: str
    password: str
    confirm_password: str
    display_name: Optional[str] = None


class UpdateProfileCommand(CamelModel):
    """
    Profile changes - only fields explicitly set are applied.

    An explicit None clears the attribute; an omitted field is left alone.
    """

    display_name: Optional[str] = None
    avatar_ref: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class IdentityInfo(CamelModel):
    """Identity information in responses"""

    id: str
    email: str
    display_name: Optional[str] = None
    avatar_ref: Optional[str] = None
    provider: str
    created_at: datetime
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, identity: Identity) -> "IdentityInfo":
        return cls(
            id=str(identity.id),
            email=identity.email,
            display_name=identity.display_name,
            avatar_ref=identity.avatar_ref,
            provider=getattr(identity.provider, "value", identity.provider),
            created_at=identity.created_at,
            last_login_at=identity.last_login_at,
        )


class AuthResponse(CamelModel):
    """Response for register, login and refresh"""

    identity: IdentityInfo
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    session_id: str


class ProfileResponse(CamelModel):
    """Response for current identity and profile update"""

    identity: IdentityInfo


class MessageResponse(CamelModel):
    """Plain acknowledgement"""

    message: str


class LogoutAllResponse(CamelModel):
    """Response for revoking every refresh token of the caller"""

    message: str
    revoked_count: int
