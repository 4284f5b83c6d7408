from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class AccessClaims:
    """Verified contents of an access token"""

    identity_id: UUID
    session_id: Optional[UUID]
    issued_at: datetime
    expires_at: datetime


class ITokenIssuer(ABC):
    """Access/refresh token minting and verification - application layer"""

    @property
    @abstractmethod
    def access_token_ttl_seconds(self) -> int:
        """Access token lifetime, reported to clients as expiresIn"""
        pass

    @abstractmethod
    def issue_access_token(self, identity_id: UUID, session_id: UUID) -> str:
        """Signed, self-contained bearer token for identity_id"""
        pass

    @abstractmethod
    def verify_access_token(self, token: str) -> Optional[AccessClaims]:
        """Claims if signature and expiry check out, otherwise None. No I/O."""
        pass

    @abstractmethod
    def issue_refresh_token(self) -> str:
        """Opaque random refresh token value"""
        pass

    @abstractmethod
    def hash_refresh_token(self, value: str) -> str:
        """Deterministic digest under which a refresh token is stored"""
        pass
