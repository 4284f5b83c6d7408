import asyncio

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import Identity
from tests.utils.api_helpers import register


@pytest.mark.asyncio
async def test_duplicate_registration_returns_conflict(client: AsyncClient):
    first = await client.post(
        "/auth/register",
        json={
            "email": "alice@example.com",
            "password": "Password123",
            "confirmPassword": "Password123",
        },
    )
    second = await client.post(
        "/auth/register",
        json={
            "email": "alice@example.com",
            "password": "Different456",
            "confirmPassword": "Different456",
        },
    )

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["kind"] == "ConflictError"
    assert "already exists" in second.json()["detail"]


@pytest.mark.asyncio
async def test_concurrent_registrations_have_one_winner(
    client: AsyncClient, db_session
):
    payload = {
        "email": "race@example.com",
        "password": "Password123",
        "confirmPassword": "Password123",
    }

    responses = await asyncio.gather(
        *(client.post("/auth/register", json=payload) for _ in range(10))
    )

    statuses = sorted(r.status_code for r in responses)
    assert statuses == [201] + [409] * 9

    identities = (
        await db_session.exec(select(Identity).where(Identity.email == "race@example.com"))
    ).all()
    assert len(identities) == 1


@pytest.mark.asyncio
async def test_concurrent_refreshes_have_at_most_one_winner(
    client: AsyncClient, test_data
):
    registered = await register(client, test_data.get_copy("registration"))
    token = registered["refreshToken"]

    responses = await asyncio.gather(
        *(client.post("/auth/refresh", json={"refreshToken": token}) for _ in range(5))
    )

    assert len(responses) == 5
    winners = [r for r in responses if r.status_code == 200]
    assert len(winners) <= 1
    assert all(r.status_code in (200, 401) for r in responses)

    if winners:
        new_token = winners[0].json()["refreshToken"]
        once = await client.post("/auth/refresh", json={"refreshToken": new_token})
        twice = await client.post("/auth/refresh", json={"refreshToken": new_token})
        assert once.status_code == 200
        assert twice.status_code == 401
