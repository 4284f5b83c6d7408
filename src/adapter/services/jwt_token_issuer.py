import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from jose import JWTError, jwt

from src.app.services.clock import Clock
from src.app.services.token_issuer import AccessClaims, ITokenIssuer

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


def _to_timestamp(moment: datetime) -> int:
    return int(moment.replace(tzinfo=UTC).timestamp())


def _from_timestamp(value: int) -> datetime:
    return datetime.fromtimestamp(value, UTC).replace(tzinfo=None)


class JwtTokenIssuer(ITokenIssuer):
    """
    JWT access tokens (python-jose) and random opaque refresh tokens.

    Expiry is checked against the injected clock rather than by jose, so the
    whole token lifecycle runs on one notion of "now".
    """

    def __init__(
        self,
        secret: str,
        clock: Clock,
        algorithm: str = "HS256",
        access_token_ttl: timedelta = timedelta(minutes=15),
    ):
        self.secret = secret
        self.clock = clock
        self.algorithm = algorithm
        self.access_token_ttl = access_token_ttl

    @property
    def access_token_ttl_seconds(self) -> int:
        return int(self.access_token_ttl.total_seconds())

    def issue_access_token(self, identity_id: UUID, session_id: UUID) -> str:
        """
        Generate JWT access token

        Args:
            identity_id: Identity UUID
            session_id: ID of the refresh token record issued alongside

        Returns:
            JWT token string (15-minute expiry by default)
        """
        now = self.clock.now()
        payload = {
            "sub": str(identity_id),
            "user_id": str(identity_id),
            "sid": str(session_id),
            "jti": uuid4().hex,
            "type": ACCESS_TOKEN_TYPE,
            "iat": _to_timestamp(now),
            "exp": _to_timestamp(now + self.access_token_ttl),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_access_token(self, token: str) -> Optional[AccessClaims]:
        """
        Verify and decode JWT token

        Args:
            token: JWT token string

        Returns:
            AccessClaims or None if invalid, expired or not an access token
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError:
            return None

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return None

        try:
            identity_id = UUID(payload["sub"])
            session_id = UUID(payload["sid"]) if payload.get("sid") else None
            issued_at = _from_timestamp(int(payload["iat"]))
            expires_at = _from_timestamp(int(payload["exp"]))
        except (KeyError, TypeError, ValueError):
            logger.warning("Signed access token with malformed claims rejected")
            return None

        if self.clock.now() >= expires_at:
            return None

        return AccessClaims(
            identity_id=identity_id,
            session_id=session_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def issue_refresh_token(self) -> str:
        return secrets.token_urlsafe(48)

    def hash_refresh_token(self, value: str) -> str:
        return hashlib.sha256(value.encode("utf-8")).hexdigest()
