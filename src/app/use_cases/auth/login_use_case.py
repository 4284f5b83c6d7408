"""
Login Use Case

Authenticates an identity by email and password and signs it in.
"""

import asyncio
import logging
from datetime import timedelta

from libs.result import Result, Return
from src.app.services.clock import Clock
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.retry import retry_read_once
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import normalize_email
from src.domain.errors import AuthError
from .dtos import AuthResponse
from .session_tokens import build_auth_response, stage_refresh_token

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for login and token issuance.

    Business Rules:
    - Unknown email, federated-only identity and wrong password all return
      the same INVALID_CREDENTIALS error
    - A bcrypt check runs in every branch so response time does not reveal
      which of the three happened
    - Creates a new refresh token record
    - Updates last_login_at
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: IPasswordHasher,
        token_issuer: ITokenIssuer,
        clock: Clock,
        refresh_token_ttl: timedelta = timedelta(days=7),
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.clock = clock
        self.refresh_token_ttl = refresh_token_ttl

    async def execute(self, email: str, password: str) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            email: Email as typed by the user
            password: Plain text password

        Returns:
            Result with AuthResponse, or INVALID_CREDENTIALS
        """
        email = normalize_email(email or "")

        async with self.uow:
            identity = await retry_read_once(
                lambda: self.uow.identities.get_by_email(email)
            )

            if identity is None or identity.password_hash is None:
                await asyncio.to_thread(self.password_hasher.verify_dummy, password)
                logger.warning("Failed login attempt")
                return Return.err(AuthError.invalid_credentials())

            password_valid = await asyncio.to_thread(
                self.password_hasher.verify, password, identity.password_hash
            )
            if not password_valid:
                logger.warning(f"Failed login attempt for identity: {identity.id}")
                return Return.err(AuthError.invalid_credentials())

            identity.last_login_at = self.clock.now()
            identity = await self.uow.identities.update(identity)

            refresh_token, record = await stage_refresh_token(
                self.uow,
                self.token_issuer,
                self.clock,
                self.refresh_token_ttl,
                identity.id,
            )

            await self.uow.commit()

        logger.info(f"Identity logged in: {identity.id}")
        return Return.ok(
            build_auth_response(self.token_issuer, identity, refresh_token, record)
        )
