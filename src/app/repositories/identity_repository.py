from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Identity


class IIdentityRepository(ABC):
    """Identity repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by normalized email address"""
        pass

    @abstractmethod
    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID"""
        pass

    @abstractmethod
    async def create(self, identity: Identity) -> Identity:
        """
        Insert a new identity.

        Raises DuplicateEmailError when the unique email index rejects the row.
        The index is authoritative: concurrent callers with the same email get
        exactly one winner, whatever process they run in.
        """
        pass

    @abstractmethod
    async def update(self, identity: Identity) -> Identity:
        """Update existing identity (last writer wins)"""
        pass
