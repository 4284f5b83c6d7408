"""
Change Password Use Case
"""

import asyncio
import logging
from uuid import UUID

from libs.result import Result, Return
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.retry import retry_read_once
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import AuthError
from .dtos import MessageResponse
from .validation import collect, password_errors

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for changing the caller's password.

    Business Rules:
    - New password must satisfy the registration password rules
    - Current password must verify; federated identities have none, so they
      always fail here
    - On failure the stored hash is left untouched
    - Existing sessions are not revoked
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(
        self, identity_id: UUID, current_password: str, new_password: str
    ) -> Result[MessageResponse]:
        field_errors = collect(
            currentPassword=[] if current_password else ["Current password is required"],
            newPassword=password_errors(new_password),
        )
        if field_errors:
            return Return.err(AuthError.validation(field_errors))

        async with self.uow:
            identity = await retry_read_once(
                lambda: self.uow.identities.get_by_id(identity_id)
            )
            if identity is None:
                return Return.err(AuthError.identity_not_found())

            current_valid = await asyncio.to_thread(
                self.password_hasher.verify, current_password, identity.password_hash
            )
            if not current_valid:
                logger.warning(
                    f"Password change rejected for identity {identity_id}: "
                    "current password mismatch"
                )
                return Return.err(AuthError.invalid_current_password())

            identity.password_hash = await asyncio.to_thread(
                self.password_hasher.hash, new_password
            )
            await self.uow.identities.update(identity)
            await self.uow.commit()

        logger.info(f"Password changed for identity: {identity_id}")
        return Return.ok(MessageResponse(message="Password changed successfully"))
