from datetime import datetime

import pytest

from src.adapter.repositories.identity_repository import IdentityRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.auth import (
    GetCurrentIdentityUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)
from src.domain.entities import Identity


async def _seed_identity(session_factory) -> Identity:
    async with session_factory() as session:
        identity = await IdentityRepository(session).create(
            Identity(
                email="user@acme.com",
                password_hash="h",
                display_name="Acme User",
                created_at=datetime(2025, 1, 1, 9, 0, 0),
            )
        )
        await session.commit()
    return identity


@pytest.mark.asyncio
async def test_get_current_identity_reads_fields_after_unit_of_work_closes(
    session_factory,
):
    """The block ends in a rollback; the response must not touch expired state"""
    seeded = await _seed_identity(session_factory)

    async with session_factory() as session:
        result = await GetCurrentIdentityUseCase(SqlAlchemyUnitOfWork(session)).execute(
            seeded.id
        )

    assert result.is_ok()
    identity = result.value.identity
    assert identity.id == str(seeded.id)
    assert identity.email == "user@acme.com"
    assert identity.display_name == "Acme User"
    assert identity.provider == "email"
    assert identity.created_at == datetime(2025, 1, 1, 9, 0, 0)


@pytest.mark.asyncio
async def test_update_profile_over_store(session_factory):
    seeded = await _seed_identity(session_factory)

    async with session_factory() as session:
        result = await UpdateProfileUseCase(SqlAlchemyUnitOfWork(session)).execute(
            seeded.id, UpdateProfileCommand(avatar_ref=" avatars/a.png ")
        )

    assert result.is_ok()
    assert result.value.identity.avatar_ref == "avatars/a.png"
    assert result.value.identity.display_name == "Acme User"

    async with session_factory() as session:
        stored = await IdentityRepository(session).get_by_id(seeded.id)
        assert stored.avatar_ref == "avatars/a.png"
