"""
Register Use Case

Creates an identity and signs it in.
"""

import asyncio
import logging
from datetime import timedelta

from libs.result import Result, Return
from src.app.repositories.errors import DuplicateEmailError
from src.app.services.clock import Clock
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.retry import retry_read_once
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Identity, IdentityProvider, normalize_email
from src.domain.errors import AuthError
from .dtos import AuthResponse, RegisterCommand
from .session_tokens import build_auth_response, stage_refresh_token
from .validation import (
    DISPLAY_NAME_MAX_LENGTH,
    clean_text,
    collect,
    email_errors,
    max_length_errors,
    password_errors,
)

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Validate email format, password rules, password confirmation
    2. Hash password with bcrypt (off the event loop, before touching the store)
    3. Insert Identity; the unique email index picks exactly one winner among
       concurrent registrations, every loser gets EMAIL_ALREADY_EXISTS
    4. Issue access token + refresh token, persist the refresh record
    5. Set last_login_at and commit atomically
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

    async def execute(self, command: RegisterCommand) -> Result[AuthResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with email, password, confirmation

        Returns:
            Result[AuthResponse] with identity and tokens,
            or VALIDATION_FAILED / EMAIL_ALREADY_EXISTS
        """
        field_errors = self._validate(command)
        if field_errors:
            return Return.err(AuthError.validation(field_errors))

        email = normalize_email(command.email)
        password_hash = await asyncio.to_thread(
            self.password_hasher.hash, command.password
        )

        async with self.uow:
            # Fast path for the sequential case; the index still decides races
            existing = await retry_read_once(
                lambda: self.uow.identities.get_by_email(email)
            )
            if existing is not None:
                return Return.err(AuthError.email_already_exists())

            now = self.clock.now()
            identity = Identity(
                email=email,
                password_hash=password_hash,
                provider=IdentityProvider.email,
                display_name=clean_text(command.display_name),
                created_at=now,
                last_login_at=now,
            )
            try:
                identity = await self.uow.identities.create(identity)
            except DuplicateEmailError:
                logger.info("Registration lost a race on an existing email")
                return Return.err(AuthError.email_already_exists())

            refresh_token, record = await stage_refresh_token(
                self.uow,
                self.token_issuer,
                self.clock,
                self.refresh_token_ttl,
                identity.id,
            )

            await self.uow.commit()

        logger.info(f"New identity registered: {identity.id}")
        return Return.ok(
            build_auth_response(self.token_issuer, identity, refresh_token, record)
        )

    @staticmethod
    def _validate(command: RegisterCommand):
        confirm_errors = []
        if command.confirm_password != command.password:
            confirm_errors.append("Passwords do not match")
        return collect(
            email=email_errors(command.email),
            password=password_errors(command.password),
            confirmPassword=confirm_errors,
            displayName=max_length_errors(
                command.display_name, "Name", DISPLAY_NAME_MAX_LENGTH
            ),
        )
