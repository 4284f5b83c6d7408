"""
Update Profile Use Case
"""

import logging
from uuid import UUID

from libs.result import Result, Return
from src.app.services.retry import retry_read_once
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import AuthError
from .dtos import IdentityInfo, ProfileResponse, UpdateProfileCommand
from .validation import (
    AVATAR_REF_MAX_LENGTH,
    DISPLAY_NAME_MAX_LENGTH,
    clean_text,
    collect,
    max_length_errors,
)

logger = logging.getLogger(__name__)


class UpdateProfileUseCase:
    """
    Use case for updating display name and avatar reference.

    Business Rules:
    - Only fields present in the request change
    - Values are trimmed; blank or null clears the field
    - Email, password and provider are never touched here
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, identity_id: UUID, command: UpdateProfileCommand
    ) -> Result[ProfileResponse]:
        field_errors = collect(
            displayName=max_length_errors(
                command.display_name, "Display name", DISPLAY_NAME_MAX_LENGTH
            ),
            avatarRef=max_length_errors(
                command.avatar_ref, "Avatar reference", AVATAR_REF_MAX_LENGTH
            ),
        )
        if field_errors:
            return Return.err(AuthError.validation(field_errors))

        async with self.uow:
            identity = await retry_read_once(
                lambda: self.uow.identities.get_by_id(identity_id)
            )
            if identity is None:
                return Return.err(AuthError.identity_not_found())

            for field in command.model_fields_set:
                setattr(identity, field, clean_text(getattr(command, field)))

            identity = await self.uow.identities.update(identity)
            await self.uow.commit()

        logger.info(f"Profile updated for identity: {identity_id}")
        return Return.ok(ProfileResponse(identity=IdentityInfo.from_entity(identity)))
