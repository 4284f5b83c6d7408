"""
Refresh Token Use Case

Exchanges a refresh token for a new access/refresh pair (rotation).
"""

import logging
from datetime import timedelta

from libs.result import Result, Return
from src.app.services.clock import Clock
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import AuthError
from .dtos import AuthResponse
from .session_tokens import build_auth_response, stage_refresh_token

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refresh token rotation.

    Business Rules:
    - The presented token is consumed (revoked) by one conditional update
      before anything else happens; among concurrent refreshes of the same
      token exactly one gets past this step
    - Unknown, replayed and expired tokens fail identically (INVALID_TOKEN)
    - The new record points at the consumed one (parent_id) and joins its
      family, forming a chain
    - Updates last_login_at
    - Never retried automatically: a retry after an ambiguous failure could
      mint a second child
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: ITokenIssuer,
        clock: Clock,
        refresh_token_ttl: timedelta = timedelta(days=7),
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.clock = clock
        self.refresh_token_ttl = refresh_token_ttl

    async def execute(self, refresh_token: str) -> Result[AuthResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to consume and rotate

        Returns:
            Result with AuthResponse containing the new pair, or INVALID_TOKEN
        """
        if not refresh_token:
            return Return.err(AuthError.invalid_refresh_token())

        token_hash = self.token_issuer.hash_refresh_token(refresh_token)

        async with self.uow:
            consumed = await self.uow.refresh_tokens.consume(
                token_hash, self.clock.now()
            )
            if consumed is None:
                logger.info("Refresh rejected: token unknown, expired or already used")
                return Return.err(AuthError.invalid_refresh_token())

            identity = await self.uow.identities.get_by_id(consumed.identity_id)
            if identity is None:
                logger.warning(
                    f"Refresh token {consumed.id} belongs to a missing identity"
                )
                return Return.err(AuthError.invalid_refresh_token())

            identity.last_login_at = self.clock.now()
            identity = await self.uow.identities.update(identity)

            new_refresh_token, record = await stage_refresh_token(
                self.uow,
                self.token_issuer,
                self.clock,
                self.refresh_token_ttl,
                identity.id,
                parent=consumed,
            )

            await self.uow.commit()

        logger.info(f"Tokens refreshed for identity: {identity.id}")
        return Return.ok(
            build_auth_response(self.token_issuer, identity, new_refresh_token, record)
        )
