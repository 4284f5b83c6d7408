from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import RefreshTokenRecord


class IRefreshTokenRepository(ABC):
    """Refresh token repository interface - application layer"""

    @abstractmethod
    async def create(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """Persist a newly issued refresh token"""
        pass

    @abstractmethod
    async def get_by_id(self, record_id: UUID) -> Optional[RefreshTokenRecord]:
        """Get record by ID"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        """Get record by token hash, whatever its state"""
        pass

    @abstractmethod
    async def get_by_identity_id(self, identity_id: UUID) -> List[RefreshTokenRecord]:
        """Get all records issued to an identity"""
        pass

    @abstractmethod
    async def consume(
        self, token_hash: str, now: datetime
    ) -> Optional[RefreshTokenRecord]:
        """
        Atomically revoke a usable token and return it.

        Locate by token_hash, require revoked=false and now < expires_at, and
        flip revoked in one conditional update. Returns the record only to the
        caller whose update changed the row; not found, already revoked,
        expired and lost races all return None.
        """
        pass

    @abstractmethod
    async def revoke_family(
        self, family_id: UUID, identity_id: UUID, now: datetime
    ) -> int:
        """Revoke the live records of one rotation chain owned by identity_id. Returns count."""
        pass

    @abstractmethod
    async def revoke_all_for_identity(self, identity_id: UUID, now: datetime) -> int:
        """Revoke every live record of an identity. Returns count revoked."""
        pass
