from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import OperationalError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import TransientStorageError
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import RefreshTokenRecord


class RefreshTokenRepository(IRefreshTokenRepository):
    """Refresh token repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """Persist a newly issued refresh token"""
        self.session.add(record)
        try:
            await self.session.flush()
        except OperationalError as exc:
            await self.session.rollback()
            raise TransientStorageError(str(exc.orig)) from exc
        await self.session.refresh(record)
        return record

    async def get_by_id(self, record_id: UUID) -> Optional[RefreshTokenRecord]:
        """Get record by ID"""
        stmt = (
            select(RefreshTokenRecord)
            .where(RefreshTokenRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        """Get record by token hash"""
        stmt = (
            select(RefreshTokenRecord)
            .where(RefreshTokenRecord.token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_identity_id(self, identity_id: UUID) -> List[RefreshTokenRecord]:
        """Get all records issued to an identity"""
        stmt = (
            select(RefreshTokenRecord)
            .where(RefreshTokenRecord.identity_id == identity_id)
            .execution_options(populate_existing=True)
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def consume(
        self, token_hash: str, now: datetime
    ) -> Optional[RefreshTokenRecord]:
        """
        Conditional update: the affected row count decides the winner.

        Every concurrent caller may have seen revoked=false a moment ago; the
        database serializes the updates and only one of them still matches
        the WHERE clause when it runs.
        """
        stmt = (
            update(RefreshTokenRecord)
            .where(
                RefreshTokenRecord.token_hash == token_hash,
                RefreshTokenRecord.revoked == False,  # noqa: E712
                RefreshTokenRecord.expires_at > now,
            )
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._execute(stmt)
        if result.rowcount != 1:
            return None

        return await self.get_by_token_hash(token_hash)

    async def revoke_family(
        self, family_id: UUID, identity_id: UUID, now: datetime
    ) -> int:
        """Revoke live records of one rotation chain"""
        stmt = (
            update(RefreshTokenRecord)
            .where(
                RefreshTokenRecord.family_id == family_id,
                RefreshTokenRecord.identity_id == identity_id,
                RefreshTokenRecord.revoked == False,  # noqa: E712
            )
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._execute(stmt)
        return result.rowcount

    async def revoke_all_for_identity(self, identity_id: UUID, now: datetime) -> int:
        """Revoke all live records for an identity"""
        stmt = (
            update(RefreshTokenRecord)
            .where(
                RefreshTokenRecord.identity_id == identity_id,
                RefreshTokenRecord.revoked == False,  # noqa: E712
            )
            .values(revoked=True, revoked_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._execute(stmt)
        return result.rowcount

    async def _execute(self, stmt):
        try:
            return await self.session.execute(stmt)
        except OperationalError as exc:
            await self.session.rollback()
            raise TransientStorageError(str(exc.orig)) from exc
