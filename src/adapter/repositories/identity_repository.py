from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import DuplicateEmailError, TransientStorageError
from src.app.repositories.identity_repository import IIdentityRepository
from src.domain.entities import Identity


class IdentityRepository(IIdentityRepository):
    """Identity repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by normalized email address"""
        stmt = select(Identity).where(Identity.email == email)
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except OperationalError as exc:
            await self.session.rollback()
            raise TransientStorageError(str(exc.orig)) from exc

    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID"""
        stmt = select(Identity).where(Identity.id == identity_id)
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except OperationalError as exc:
            await self.session.rollback()
            raise TransientStorageError(str(exc.orig)) from exc

    async def create(self, identity: Identity) -> Identity:
        """
        Insert a new identity.

        The INSERT is flushed immediately so the unique email index is checked
        here, inside the caller's transaction, rather than at some later commit.
        """
        self.session.add(identity)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateEmailError(identity.email) from exc
        except OperationalError as exc:
            await self.session.rollback()
            raise TransientStorageError(str(exc.orig)) from exc
        await self.session.refresh(identity)
        return identity

    async def update(self, identity: Identity) -> Identity:
        """Update existing identity"""
        self.session.add(identity)
        try:
            await self.session.flush()
        except OperationalError as exc:
            await self.session.rollback()
            raise TransientStorageError(str(exc.orig)) from exc
        await self.session.refresh(identity)
        return identity
