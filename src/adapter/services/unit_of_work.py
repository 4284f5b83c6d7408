from sqlalchemy.exc import OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.identity_repository import IdentityRepository
from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.app.repositories.errors import TransientStorageError
from src.app.services.deadline import lift_store_deadline
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.identities = IdentityRepository(self.session)
        self.refresh_tokens = RefreshTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # No-op after a successful commit; discards everything otherwise
        await self.rollback()

    async def commit(self):
        lift_store_deadline()
        try:
            await self.session.commit()
        except OperationalError as exc:
            await self.session.rollback()
            raise TransientStorageError(str(exc.orig)) from exc

    async def rollback(self):
        await self.session.rollback()
