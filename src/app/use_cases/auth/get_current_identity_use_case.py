"""
Get Current Identity Use Case
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.retry import retry_read_once
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import AuthError
from .dtos import IdentityInfo, ProfileResponse


class GetCurrentIdentityUseCase:
    """Loads the identity behind an access token"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, identity_id: UUID) -> Result[ProfileResponse]:
        async with self.uow:
            identity = await retry_read_once(
                lambda: self.uow.identities.get_by_id(identity_id)
            )
            if identity is None:
                return Return.err(AuthError.identity_not_found())

            # Build while the session is open; leaving the block rolls back
            # and expires the loaded entity
            response = ProfileResponse(identity=IdentityInfo.from_entity(identity))

        return Return.ok(response)
