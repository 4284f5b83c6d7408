from abc import ABC, abstractmethod
from typing import Optional


class IPasswordHasher(ABC):
    """
    One-way salted password hashing - application layer.

    Implementations are stateless. verify() never raises: a missing or
    malformed digest is simply a failed verification.
    """

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """Hash with a fresh random salt and the configured work factor"""
        pass

    @abstractmethod
    def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        """Constant-time comparison of plaintext against digest"""
        pass

    @abstractmethod
    def verify_dummy(self, plaintext: str) -> None:
        """Spend the same time as verify() when there is no digest to check"""
        pass
