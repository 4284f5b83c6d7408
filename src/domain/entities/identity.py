"""
Identity Entity

Represents one registered account.
"""

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import IdentityProvider


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup (case-insensitive uniqueness)."""
    return email.strip().lower()


class Identity(SQLModel, table=True):
    """
    Identity entity - a registered account and its login key.

    Business Rules:
    - Email is stored normalized and must be unique across all identities;
      the unique index is the only arbiter under concurrent registration
    - Password stored as bcrypt hash; null only for federated identities
    - display_name / avatar_ref are writable by the owner only
    - last_login_at moves on every successful login or refresh
    """

    __tablename__ = "identities"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output is 60 chars
    provider: IdentityProvider = Field(default=IdentityProvider.email)

    # Profile
    display_name: Optional[str] = Field(default=None, max_length=100)
    avatar_ref: Optional[str] = Field(default=None, max_length=500)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC).replace(tzinfo=None),
        sa_column=Column(DateTime, nullable=False),
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    @property
    def is_federated(self) -> bool:
        return self.password_hash is None
