"""
RefreshTokenRecord Entity

Stores issued refresh tokens and their rotation chain.
"""

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class RefreshTokenRecord(SQLModel, table=True):
    """
    RefreshTokenRecord entity - one issued refresh token.

    Business Rules:
    - Token value is never stored; token_hash is its SHA-256 digest
    - revoked only ever flips false -> true (rotation, logout)
    - A revoked record can never mint new tokens, whatever expires_at says
    - parent_id links a rotated token to the record it was exchanged from;
      it is unique, so a record has at most one child
    - family_id is shared by every record of one rotation chain (one login)
    - Expires after 7 days
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    identity_id: UUID = Field(foreign_key="identities.id", nullable=False, index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 hex
    parent_id: Optional[UUID] = Field(
        default=None, foreign_key="refresh_tokens.id", unique=True
    )
    family_id: UUID = Field(nullable=False, index=True)

    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    issued_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC).replace(tzinfo=None),
        sa_column=Column(DateTime, nullable=False),
    )
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_refresh_token_expires_at", "expires_at"),
        Index("idx_refresh_token_identity_revoked", "identity_id", "revoked"),
    )

    def is_usable(self, now: datetime) -> bool:
        return not self.revoked and now < self.expires_at
