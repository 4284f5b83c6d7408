from typing import Optional

import bcrypt

from src.app.services.password_hasher import IPasswordHasher

# bcrypt only looks at the first 72 bytes; newer releases reject longer input
BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher(IPasswordHasher):
    """
    bcrypt password hasher.

    The digest embeds the salt and cost factor, so verify() needs nothing but
    the stored string and old hashes keep verifying after rounds change.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_digest = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, plaintext: str) -> str:
        digest = bcrypt.hashpw(self._encode(plaintext), bcrypt.gensalt(self.rounds))
        return digest.decode("utf-8")

    def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        if not digest:
            return False
        try:
            return bcrypt.checkpw(self._encode(plaintext), digest.encode("utf-8"))
        except ValueError:
            # Malformed digest: a failed verification, not a crash
            return False

    def verify_dummy(self, plaintext: str) -> None:
        bcrypt.checkpw(self._encode(plaintext), self._dummy_digest)

    @staticmethod
    def _encode(plaintext: str) -> bytes:
        return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]
