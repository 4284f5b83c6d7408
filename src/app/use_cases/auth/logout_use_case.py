"""
Logout Use Case

Revokes the refresh tokens tied to the caller's session, or all of them.
"""

import logging
from typing import Optional, Set
from uuid import UUID

from libs.result import Result, Return
from src.app.services.clock import Clock
from src.app.services.token_issuer import AccessClaims, ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from .dtos import LogoutAllResponse, MessageResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for logout.

    Business Rules:
    - The access token names its session (the refresh record it was issued
      with); the live record of that session's chain is revoked
    - An optional refresh token from the body is revoked too, but only if it
      belongs to the caller
    - Idempotent: logging out twice, or with an already-rotated session,
      still succeeds
    - Access tokens themselves stay valid until they expire
    """

    def __init__(self, uow: UnitOfWork, token_issuer: ITokenIssuer, clock: Clock):
        self.uow = uow
        self.token_issuer = token_issuer
        self.clock = clock

    async def execute(
        self, claims: AccessClaims, refresh_token: Optional[str] = None
    ) -> Result[MessageResponse]:
        """
        Execute logout use case.

        Args:
            claims: Verified access token claims of the caller
            refresh_token: Optional refresh token presented in the body

        Returns:
            Result with MessageResponse
        """
        async with self.uow:
            families: Set[UUID] = set()

            if claims.session_id is not None:
                record = await self.uow.refresh_tokens.get_by_id(claims.session_id)
                if record is not None and record.identity_id == claims.identity_id:
                    families.add(record.family_id)

            if refresh_token:
                record = await self.uow.refresh_tokens.get_by_token_hash(
                    self.token_issuer.hash_refresh_token(refresh_token)
                )
                if record is not None and record.identity_id == claims.identity_id:
                    families.add(record.family_id)

            revoked = 0
            now = self.clock.now()
            for family_id in families:
                revoked += await self.uow.refresh_tokens.revoke_family(
                    family_id, claims.identity_id, now
                )

            await self.uow.commit()

        logger.info(
            f"Identity {claims.identity_id} logged out ({revoked} token(s) revoked)"
        )
        return Return.ok(MessageResponse(message="Logged out successfully"))

    async def revoke_all(self, claims: AccessClaims) -> Result[LogoutAllResponse]:
        """
        Revoke every live refresh token of the caller, on all devices.

        Returns:
            Result with LogoutAllResponse containing the revoked count
        """
        async with self.uow:
            count = await self.uow.refresh_tokens.revoke_all_for_identity(
                claims.identity_id, self.clock.now()
            )
            await self.uow.commit()

        logger.info(f"Identity {claims.identity_id} logged out everywhere ({count})")
        return Return.ok(
            LogoutAllResponse(
                message="Logged out from all devices", revoked_count=count
            )
        )
