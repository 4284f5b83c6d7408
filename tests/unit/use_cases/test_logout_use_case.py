from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.token_issuer import AccessClaims
from src.app.use_cases.auth import LogoutUseCase
from src.domain.entities import RefreshTokenRecord


@pytest.fixture
def use_case(mock_uow, token_issuer, clock):
    return LogoutUseCase(mock_uow, token_issuer, clock)


def _record(identity_id, clock):
    return RefreshTokenRecord(
        id=uuid4(),
        identity_id=identity_id,
        token_hash="b" * 64,
        family_id=uuid4(),
        issued_at=clock.now(),
        expires_at=clock.now() + timedelta(days=7),
    )


def _claims(identity_id, session_id, clock):
    return AccessClaims(
        identity_id=identity_id,
        session_id=session_id,
        issued_at=clock.now(),
        expires_at=clock.now() + timedelta(minutes=15),
    )


@pytest.mark.asyncio
async def test_logout_revokes_session_family(use_case, mock_uow, clock):
    identity_id = uuid4()
    record = _record(identity_id, clock)
    mock_uow.refresh_tokens.get_by_id.return_value = record
    mock_uow.refresh_tokens.revoke_family.return_value = 1

    result = await use_case.execute(_claims(identity_id, record.id, clock))

    assert result.is_ok()
    assert result.value.message == "Logged out successfully"
    mock_uow.refresh_tokens.revoke_family.assert_called_once_with(
        record.family_id, identity_id, clock.now()
    )
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_revokes_body_token_of_same_identity(
    use_case, mock_uow, token_issuer, clock
):
    identity_id = uuid4()
    record = _record(identity_id, clock)
    mock_uow.refresh_tokens.get_by_token_hash.return_value = record

    result = await use_case.execute(_claims(identity_id, None, clock), "body-token")

    assert result.is_ok()
    mock_uow.refresh_tokens.get_by_token_hash.assert_called_once_with(
        token_issuer.hash_refresh_token("body-token")
    )
    mock_uow.refresh_tokens.revoke_family.assert_called_once_with(
        record.family_id, identity_id, clock.now()
    )


@pytest.mark.asyncio
async def test_logout_ignores_token_of_other_identity(use_case, mock_uow, clock):
    mock_uow.refresh_tokens.get_by_token_hash.return_value = _record(uuid4(), clock)

    result = await use_case.execute(_claims(uuid4(), None, clock), "someone-elses")

    assert result.is_ok()
    mock_uow.refresh_tokens.revoke_family.assert_not_called()


@pytest.mark.asyncio
async def test_logout_is_idempotent_for_unknown_session(use_case, mock_uow, clock):
    result = await use_case.execute(_claims(uuid4(), uuid4(), clock))

    assert result.is_ok()
    mock_uow.refresh_tokens.revoke_family.assert_not_called()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_revoke_all(use_case, mock_uow, clock):
    identity_id = uuid4()
    mock_uow.refresh_tokens.revoke_all_for_identity.return_value = 3

    result = await use_case.revoke_all(_claims(identity_id, uuid4(), clock))

    assert result.is_ok()
    assert result.value.revoked_count == 3
    mock_uow.refresh_tokens.revoke_all_for_identity.assert_called_once_with(
        identity_id, clock.now()
    )
