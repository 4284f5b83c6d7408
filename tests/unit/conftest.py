from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.jwt_token_issuer import JwtTokenIssuer
from src.app.services.clock import FixedClock

TEST_SECRET = "unit-test-secret"


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.identities = MagicMock()
    uow.identities.get_by_email = AsyncMock(return_value=None)
    uow.identities.get_by_id = AsyncMock(return_value=None)
    uow.identities.create = AsyncMock(side_effect=lambda identity: identity)
    uow.identities.update = AsyncMock(side_effect=lambda identity: identity)

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.create = AsyncMock(side_effect=lambda record: record)
    uow.refresh_tokens.get_by_id = AsyncMock(return_value=None)
    uow.refresh_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.refresh_tokens.consume = AsyncMock(return_value=None)
    uow.refresh_tokens.revoke_family = AsyncMock(return_value=0)
    uow.refresh_tokens.revoke_all_for_identity = AsyncMock(return_value=0)
    return uow


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 1, 15, 12, 0, 0))


@pytest.fixture
def password_hasher():
    # Minimum cost keeps the suite fast; the algorithm is the same
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_issuer(clock):
    return JwtTokenIssuer(
        secret=TEST_SECRET, clock=clock, access_token_ttl=timedelta(minutes=15)
    )
